import uuid

import django.db.models.functions.text
from django.db import migrations, models

import ris_core.accounts.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("username", models.CharField(db_index=True, max_length=50)),
                ("email", models.EmailField(db_index=True, max_length=100)),
                ("mobile_number", models.CharField(db_index=True, max_length=10)),
                ("password", models.CharField(db_column="password_hash", max_length=128, verbose_name="password")),
                ("full_name", models.CharField(max_length=100)),
                ("gender", models.CharField(choices=[("Male", "Male"), ("Female", "Female"), ("Other", "Other")], max_length=8)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                ("status", models.CharField(choices=[("Active", "Active"), ("Inactive", "Inactive")], db_index=True, default="Inactive", max_length=10)),
                ("facility_id", models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ("role", models.CharField(choices=[("Technician", "Technician"), ("FrontDesk", "Front Desk"), ("Radiologist", "Radiologist")], db_index=True, max_length=16)),
                ("role_details", models.JSONField(blank=True, default=dict)),
                ("is_deleted", models.BooleanField(db_index=True, default=False)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("is_staff", models.BooleanField(default=False)),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "db_table": "accounts_user",
            },
            managers=[
                ("objects", ris_core.accounts.models.UserManager()),
                ("all_objects", ris_core.accounts.models.AllUsersManager()),
            ],
        ),
        migrations.AddIndex(
            model_name="user",
            index=models.Index(fields=["role", "status"], name="idx_user_role_status"),
        ),
        migrations.AddIndex(
            model_name="user",
            index=models.Index(fields=["facility_id", "is_deleted"], name="idx_user_facility_live"),
        ),
        migrations.AddConstraint(
            model_name="user",
            constraint=models.UniqueConstraint(
                django.db.models.functions.text.Lower("email"),
                condition=models.Q(("is_deleted", False)),
                name="uq_user_email_live",
            ),
        ),
        migrations.AddConstraint(
            model_name="user",
            constraint=models.UniqueConstraint(
                condition=models.Q(("is_deleted", False)),
                fields=("username",),
                name="uq_user_username_live",
            ),
        ),
        migrations.AddConstraint(
            model_name="user",
            constraint=models.UniqueConstraint(
                condition=models.Q(("is_deleted", False)),
                fields=("mobile_number",),
                name="uq_user_mobile_live",
            ),
        ),
    ]
