from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('locations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Vehicle',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('vehicle_type', models.CharField(choices=[('carros', 'Cars'), ('motos', 'Motorcycles'), ('caminhoes', 'Trucks')], default='carros', max_length=20)),
                ('plate', models.CharField(max_length=10, unique=True)),
                ('manufacture_year', models.PositiveIntegerField()),
                ('model_year', models.PositiveIntegerField(db_index=True)),
                ('mileage', models.PositiveIntegerField(default=0)),
                ('color', models.CharField(blank=True, max_length=50)),
                ('fuel_type', models.CharField(blank=True, max_length=50)),
                ('price', models.DecimalField(db_index=True, decimal_places=2, max_digits=12)),
                ('fipe_code', models.CharField(blank=True, max_length=20)),
                ('fipe_value', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('description', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('Available', 'Available'), ('Reserved', 'Reserved'), ('Sold', 'Sold')], db_index=True, default='Available', max_length=20)),
                ('home_highlight', models.BooleanField(default=False)),
                ('brand_highlight', models.BooleanField(default=False)),
                ('features', models.JSONField(blank=True, default=list)),
                ('specifications', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('brand', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='catalog.brand')),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='catalog.category')),
                ('model', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='catalog.vehiclemodel')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='locations.store')),
            ],
            options={
                'db_table': 'vehicles',
                'indexes': [models.Index(fields=['store', 'status'], name='vehicle_store_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='VehiclePhoto',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('image', models.ImageField(upload_to='vehicles/')),
                ('is_cover', models.BooleanField(default=False)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('vehicle', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='photos', to='inventory.vehicle')),
            ],
            options={
                'db_table': 'vehicle_photos',
                'ordering': ['display_order', 'id'],
            },
        ),
        migrations.AddConstraint(
            model_name='vehiclephoto',
            constraint=models.UniqueConstraint(condition=models.Q(('is_cover', True)), fields=('vehicle',), name='unique_cover_photo_per_vehicle'),
        ),
    ]
