# ris_core/common/management/commands/seed_directory.py

from django.core.management.base import BaseCommand
from django.db import transaction

from ris_core.accounts.models import Gender, StaffRole, User
from ris_core.accounts.services import UserDirectory
from ris_core.facilities.models import Facility, FacilityStatus, FacilityType, IntegrationStatus
from ris_core.facilities.services import FacilityRegistry

SAMPLE_FACILITIES = [
    {
        "facility_name": "Apollo Hospital",
        "facility_code": "AP-HOS-001",
        "facility_type": FacilityType.HOSPITAL,
        "facility_description": "Leading multi-specialty hospital.",
        "address_line_1": "123 Main Road",
        "address_line_2": "Block A",
        "city": "Delhi",
        "state": "Delhi",
        "country": "India",
        "pincode": "110001",
        "contact_number": "9876543210",
        "email_id": "contact@apollo.com",
        "letterhead_logo": "/uploads/logos/apollo.png",
        "header_text": "Apollo Healthcare",
        "footer_text": "ISO Certified Hospital",
        "pacs_ae_title": "APOLLO_AE",
        "pacs_ip_address": "192.168.1.10",
        "pacs_port": 104,
        "ris_url": "https://ris.apollo.com",
        "integration_status": IntegrationStatus.CONNECTED,
        "status": FacilityStatus.ACTIVE,
    },
    {
        "facility_name": "City Diagnostic Center",
        "facility_code": "CDC-002",
        "facility_type": FacilityType.DIAGNOSTIC_CENTER,
        "city": "Mumbai",
        "state": "Maharashtra",
        "country": "India",
        "pincode": "400001",
        "contact_number": "9988776655",
        "email_id": "info@cdc.com",
        "pacs_ae_title": "CDC_AE",
        "pacs_ip_address": "192.168.2.20",
        "pacs_port": 104,
        "ris_url": "https://ris.cdc.com",
        "integration_status": IntegrationStatus.PENDING,
        "status": FacilityStatus.ACTIVE,
    },
]


class Command(BaseCommand):
    help = "Seed sample facilities and a directory administrator (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--admin-username", default="admin")
        parser.add_argument("--admin-password", default="Admin@12345")
        parser.add_argument("--admin-email", default="admin@ris.local")
        parser.add_argument("--admin-mobile", default="9000000000")

    @transaction.atomic
    def handle(self, *args, **options):
        created = 0
        for data in SAMPLE_FACILITIES:
            if Facility.objects.filter(facility_code=data["facility_code"]).exists():
                continue
            FacilityRegistry.create(actor_id=None, data=data)
            created += 1
        self.stdout.write(self.style.SUCCESS(f"Facilities ensured. Newly created: {created}"))

        username = options["admin_username"]
        if User.objects.filter(username=username).exists():
            self.stdout.write(f"Administrator '{username}' already exists.")
            return

        admin = UserDirectory.create(
            actor_id=None,
            username=username,
            email=options["admin_email"],
            mobile_number=options["admin_mobile"],
            password=options["admin_password"],
            full_name="Directory Administrator",
            gender=Gender.OTHER,
            role=StaffRole.RADIOLOGIST,
            role_fields={
                "doctor_id": "ADMIN-001",
                "registration_number": "ADMIN-REG-001",
                "specialty": "Radiology",
            },
        )
        admin.is_staff = True
        admin.is_superuser = True
        admin.save(update_fields=["is_staff", "is_superuser", "updated_at"])

        self.stdout.write(self.style.SUCCESS(f"Administrator '{username}' created."))
