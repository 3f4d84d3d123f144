"""
Management command to load the default taxonomy, stores and users
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from backend.catalog.models import Category, Brand, VehicleModel
from backend.core.cache_signals import suspend_cache_signals, invalidate_lookup_lists
from backend.locations.models import Store

User = get_user_model()

CATEGORIES = [
    ('Sedan', '🚗'),
    ('SUV', '🚙'),
    ('Hatchback', '🚗'),
    ('Pickup', '🛻'),
    ('Moto', '🏍️'),
    ('Caminhão', '🚚'),
]

BRANDS = [
    ('21', 'FIAT'),
    ('22', 'FORD'),
    ('23', 'GM - CHEVROLET'),
    ('24', 'HONDA'),
    ('25', 'HYUNDAI'),
    ('26', 'NISSAN'),
    ('27', 'PEUGEOT'),
    ('28', 'RENAULT'),
    ('29', 'TOYOTA'),
    ('30', 'VOLKSWAGEN'),
]

# (brand name, model fipe id, model name)
MODELS = [
    ('FIAT', '5940', 'PALIO 1.0 FIRE'),
    ('FIAT', '5941', 'UNO 1.0 VIVACE'),
    ('TOYOTA', '5942', 'COROLLA GLI UPPER 2.0'),
    ('TOYOTA', '5943', 'HILUX CD 4X4 2.8'),
    ('VOLKSWAGEN', '5944', 'GOL 1.0'),
    ('VOLKSWAGEN', '5945', 'AMAROK CD 4X4 2.0'),
]

HEAD_STORE = {
    'name': 'Matriz São Paulo',
    'cnpj': '12.345.678/0001-90',
    'address': 'Av. Paulista, 1000 - São Paulo, SP',
    'phone': '(11) 98888-7777',
}

BRANCH_STORE = {
    'name': 'Filial Campinas',
    'cnpj': '12.345.678/0002-71',
    'address': 'Av. Brasil, 500 - Campinas, SP',
    'phone': '(19) 98777-6666',
}


class Command(BaseCommand):
    help = "Loads default vehicle categories, brands, models, stores and users (idempotent)"

    def add_arguments(self, parser):
        parser.add_argument(
            '--skip-users',
            action='store_true',
            help='Do not create the default admin and manager users',
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS("SEEDING CATALOG"))
        self.stdout.write(self.style.SUCCESS("=" * 80))

        with suspend_cache_signals(), transaction.atomic():
            created = {
                'categories': self._seed_categories(),
                'brands': self._seed_brands(),
                'models': self._seed_models(),
            }
            head = self._seed_store(HEAD_STORE)
            self._seed_store(dict(BRANCH_STORE, parent=head))
            if not options['skip_users']:
                self._seed_user('admin', 'admin@autoshop.com', 'admin123', 'Admin User', User.ROLE_ADMIN, None)
                self._seed_user('manager', 'manager@autoshop.com', 'manager123', 'Manager User', User.ROLE_MANAGER, head)

        invalidate_lookup_lists()

        self.stdout.write(self.style.SUCCESS("=" * 80))
        for label, count in created.items():
            self.stdout.write(f"{label.capitalize()} created: {count}")
        self.stdout.write(self.style.SUCCESS("=" * 80))

    def _seed_categories(self):
        count = 0
        for name, icon in CATEGORIES:
            _, created = Category.objects.get_or_create(name=name, defaults={'icon': icon, 'active': True})
            count += created
        return count

    def _seed_brands(self):
        count = 0
        for fipe_id, name in BRANDS:
            _, created = Brand.objects.get_or_create(name=name, defaults={'brand_fipe_id': fipe_id})
            count += created
        return count

    def _seed_models(self):
        count = 0
        for brand_name, fipe_id, name in MODELS:
            brand = Brand.objects.get(name=brand_name)
            _, created = VehicleModel.objects.get_or_create(
                brand=brand, name=name, defaults={'model_fipe_id': fipe_id}
            )
            count += created
        return count

    def _seed_store(self, data):
        data = dict(data)
        store, created = Store.all_objects.get_or_create(cnpj=data.pop('cnpj'), defaults=data)
        if created:
            self.stdout.write(self.style.SUCCESS(f"  ✓ Created store: {store.name}"))
        else:
            self.stdout.write(self.style.WARNING(f"  ⊘ Skipped (already exists): {store.name}"))
        return store

    def _seed_user(self, username, email, password, name, role, store):
        if User.objects.filter(email=email).exists():
            self.stdout.write(self.style.WARNING(f"  ⊘ Skipped (already exists): {email}"))
            return
        User.objects.create_user(
            username=username, email=email, password=password, name=name, role=role, store=store
        )
        self.stdout.write(self.style.SUCCESS(f"  ✓ Created {role}: {username} / {password}"))
