"""
Seed management command.

Populates the database with a demo tenant:
  - 1 organization with an owner login
  - 2 sessions with weekly timetables (Mon/Wed/Fri mornings, Tue/Thu evenings)
  - 1 space on the operating-hours grid
  - 2 clients (one limited, one unlimited)

Usage:
    python manage.py seed_demo
    python manage.py seed_demo --flush   # wipe the demo organization and re-seed
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.clients.models import Client
from apps.organizations.models import MembershipRole, Organization, OrganizationMembership
from apps.spaces.models import Space
from apps.timetable.models import ServiceSession, TimeSlotTemplate, Weekday

DEMO_SLUG = 'demo-studio'


class Command(BaseCommand):
    help = 'Seed a demo organization with sessions, a space and clients'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete the demo organization (and everything it owns) before seeding',
        )
        parser.add_argument(
            '--owner-password', default='demo-owner',
            help='Password for the demo owner account',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write('Flushing demo organization...')
            Organization.objects.filter(slug=DEMO_SLUG).delete()

        self.stdout.write('Seeding organization...')
        org, _ = Organization.objects.get_or_create(
            slug=DEMO_SLUG,
            defaults={
                'name': 'Demo Studio',
                'email': 'hello@demo-studio.example',
                'booking_change_hours': 12,
                'require_membership_for_booking': True,
            },
        )

        User = get_user_model()
        owner, created = User.objects.get_or_create(
            username='demo-owner',
            defaults={'email': 'owner@demo-studio.example', 'first_name': 'Demo', 'last_name': 'Owner'},
        )
        if created:
            owner.set_password(options['owner_password'])
            owner.save()
        OrganizationMembership.objects.get_or_create(
            user=owner, organization=org, defaults={'role': MembershipRole.OWNER},
        )
        self.stdout.write(self.style.SUCCESS('  ✔ Organization and owner ready'))

        # ── Sessions ──────────────────────────────────────────────────────────
        self.stdout.write('Seeding sessions...')
        sessions_data = [
            {
                'name': 'Morning Yoga', 'slots': 12, 'theme_color': '#10B981',
                'days': [Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY],
                'times': [('07:00', '08:00'), ('09:00', '10:00')],
            },
            {
                'name': 'Evening Pilates', 'slots': 8, 'theme_color': '#8B5CF6',
                'days': [Weekday.TUESDAY, Weekday.THURSDAY],
                'times': [('18:00', '19:00')],
            },
        ]
        for data in sessions_data:
            session, _ = ServiceSession.objects.get_or_create(
                organization=org, name=data['name'],
                defaults={'slots': data['slots'], 'theme_color': data['theme_color']},
            )
            for day in data['days']:
                for start, end in data['times']:
                    TimeSlotTemplate.objects.get_or_create(
                        session=session, day_of_week=day, start_time=start, end_time=end,
                    )
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(sessions_data)} sessions with weekly timetables'))

        # ── Space ─────────────────────────────────────────────────────────────
        Space.objects.get_or_create(
            organization=org, name='Studio Room',
            defaults={'capacity': 4, 'description': 'Bookable in 30-minute blocks during opening hours.'},
        )
        self.stdout.write(self.style.SUCCESS('  ✔ 1 space created'))

        # ── Clients ───────────────────────────────────────────────────────────
        clients_data = [
            {'email': 'asha@example.com', 'name': 'Asha Rao', 'session_allowance': 10},
            {'email': 'leo@example.com', 'name': 'Leo Park', 'session_allowance': None},
        ]
        for c in clients_data:
            Client.objects.get_or_create(
                organization=org, email=c['email'],
                defaults={'name': c['name'], 'session_allowance': c['session_allowance']},
            )
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(clients_data)} clients created'))

        self.stdout.write(self.style.SUCCESS(f'\n✅ Seed complete! Log in as "{owner.username}".'))
