from django.core.management.base import BaseCommand
from backend.core.cache_utils import invalidate_cache_pattern
from backend.pricing.fipe import CACHE_KEY_PREFIX, VEHICLE_TYPES


class Command(BaseCommand):
    help = 'Remove cached FIPE price table responses (Redis cache only)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--type',
            choices=VEHICLE_TYPES,
            help='Only clear entries of one vehicle type',
        )

    def handle(self, *args, **options):
        pattern = f'{CACHE_KEY_PREFIX}:'
        if options['type']:
            pattern += f"{options['type']}:"

        deleted = invalidate_cache_pattern(pattern)
        self.stdout.write(self.style.SUCCESS(f'Removed {deleted} cached FIPE entries matching "{pattern}"'))
