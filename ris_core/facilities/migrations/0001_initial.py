import uuid

import django.core.validators
import django.db.models.functions.text
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Facility",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("facility_name", models.CharField(max_length=200)),
                ("facility_code", models.CharField(blank=True, max_length=50, null=True, validators=[django.core.validators.RegexValidator(message="Facility code may contain only letters, digits, hyphens and underscores.", regex="^[A-Za-z0-9_-]+$")])),
                ("facility_type", models.CharField(choices=[("Hospital", "Hospital"), ("Diagnostic Center", "Diagnostic Center"), ("Clinic", "Clinic")], db_index=True, max_length=24)),
                ("facility_description", models.TextField(blank=True, default="")),
                ("address_line_1", models.CharField(blank=True, default="", max_length=255)),
                ("address_line_2", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("country", models.CharField(blank=True, default="", max_length=100)),
                ("pincode", models.CharField(blank=True, default="", max_length=10)),
                ("contact_number", models.CharField(blank=True, default="", max_length=15)),
                ("email_id", models.EmailField(blank=True, default="", max_length=255)),
                ("letterhead_logo", models.CharField(blank=True, default="", max_length=500)),
                ("header_text", models.TextField(blank=True, default="")),
                ("footer_text", models.TextField(blank=True, default="")),
                ("pacs_ae_title", models.CharField(blank=True, default="", max_length=50)),
                ("pacs_ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("pacs_port", models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(65535)])),
                ("ris_url", models.URLField(blank=True, default="", max_length=500)),
                ("integration_status", models.CharField(choices=[("Connected", "Connected"), ("Pending", "Pending"), ("Failed", "Failed")], db_index=True, default="Pending", max_length=16)),
                ("status", models.CharField(choices=[("Active", "Active"), ("Inactive", "Inactive"), ("Suspended", "Suspended")], db_index=True, default="Active", max_length=16)),
                ("created_by", models.UUIDField(blank=True, db_index=True, null=True)),
                ("modified_by", models.UUIDField(blank=True, null=True)),
            ],
            options={
                "db_table": "facilities_facility",
            },
        ),
        migrations.AddIndex(
            model_name="facility",
            index=models.Index(fields=["facility_type", "status"], name="idx_facility_type_status"),
        ),
        migrations.AddConstraint(
            model_name="facility",
            constraint=models.UniqueConstraint(fields=("facility_code",), name="uq_facility_code"),
        ),
        migrations.AddConstraint(
            model_name="facility",
            constraint=models.UniqueConstraint(
                django.db.models.functions.text.Lower("facility_name"),
                name="uq_facility_name_ci",
            ),
        ),
    ]
