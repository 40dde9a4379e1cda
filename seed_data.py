"""
Seed data for local development of Portero Residencial
Creates an owner with a residential, invited residents, and visitor QR codes
"""
import asyncio

from dotenv import load_dotenv
load_dotenv()

from infrastructure.database import get_session_maker, init_db, dispose_engine
from infrastructure.identity import IdentityError, LocalIdentityProvider
from infrastructure.stores import InvitationStore, QrCodeStore, ResidentialStore, UserStore
from domain.services.invitations import accept_invitation, create_invitation
from domain.services.qr_issuance import issue_qr_code
from domain.services.registration import register_owner

OWNER_EMAIL = "admin@residencialdelvalle.test"
DEMO_PASSWORD = "portero123"

RESIDENTS = [
    {"name": "Juan Pérez García", "apartment": "A-101", "email": "juan.perez@example.test"},
    {"name": "María Rodríguez López", "apartment": "A-205", "email": "maria.rodriguez@example.test"},
    {"name": "Carlos Martínez Hernández", "apartment": "B-103", "email": "carlos.martinez@example.test"},
]

VISITORS = [
    ("María González", "Cena familiar"),
    ("Delivery Uber Eats", ""),
]


async def seed_database():
    """Seed the database with demo data"""
    print("🌱 Starting database seeding...")

    await init_db()
    print("✅ Database initialized")

    try:
        async with get_session_maker()() as session:
            await _seed(session)
    finally:
        await dispose_engine()


async def _seed(session):
    identity = LocalIdentityProvider(session)
    users = UserStore(session)
    residentials = ResidentialStore(session)
    invitations = InvitationStore(session)
    qr_codes = QrCodeStore(session)

    # 1. Owner + residential
    print("\n📍 Registering owner...")
    try:
        owner, residential = await register_owner(
            name="Administración Del Valle",
            email=OWNER_EMAIL,
            password=DEMO_PASSWORD,
            confirm_password=DEMO_PASSWORD,
            residential_name="Residencial del Valle",
            address="Av. Principal 1234, Monterrey, NL",
            identity=identity,
            residentials=residentials,
            users=users,
        )
    except IdentityError as e:
        print(f"   ⚠️  {OWNER_EMAIL}: {e.code} (already seeded?)")
        return
    print(f"   ✅ {residential.name} (ID: {residential.id})")

    # 2. Residents through the invitation flow
    print("\n👥 Inviting residents...")
    residents = []
    for data in RESIDENTS:
        invitation = await create_invitation(invitations, users, residential.id, data["email"])
        resident = await accept_invitation(
            token=invitation.token,
            name=data["name"],
            apartment=data["apartment"],
            password=DEMO_PASSWORD,
            confirm_password=DEMO_PASSWORD,
            invitations=invitations,
            users=users,
            identity=identity,
        )
        residents.append(resident)
        print(f"   ✅ {resident.name} - {resident.apartment} ({resident.email})")

    # 3. Visitor QR codes for the first resident
    print("\n🔑 Issuing visitor QR codes...")
    for visitor_name, note in VISITORS:
        qr = await issue_qr_code(residents[0], visitor_name, note, qr_codes)
        print(f"   ✅ {visitor_name} until {qr.expires_at:%d/%m/%Y %H:%M} UTC")
        print(f"      payload: {qr.qr_data}")

    print("\n🎉 Seeding complete!")
    print(f"   Owner login: {OWNER_EMAIL} / {DEMO_PASSWORD}")
    print(f"   Resident login: {RESIDENTS[0]['email']} / {DEMO_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(seed_database())
