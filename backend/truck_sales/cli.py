# Overview: Flask CLI command groups for bootstrap, seeding, accounts and maintenance.

# backend/truck_sales/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init [--username admin --email admin@example.com --password "..."]
#   Create tables (if missing) and the first admin account.
# - python -m flask system seed
#   Insert sample trucks, inquiries and a financing application (idempotent by VIN).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Admin accounts:
# - python -m flask users list
# - python -m flask users create --username admin --email admin@example.com --password "Password123!"
# - python -m flask users set-password admin --password "NewPassword123!"
# - python -m flask users deactivate admin
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions
#   Delete expired and revoked admin sessions.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Truck, Inquiry, FinancingApplication, User
from .services import inventory_service, session_service
from .services.auth_service import create_user, set_password, PasswordValidationError


PLACEHOLDER_IMAGE = "/placeholder.svg?height=600&width=800"

SAMPLE_TRUCKS = [
    {
        "title": "2022 Ford F-150 XLT",
        "price_cents": 4_299_900,
        "year": 2022,
        "make": "Ford",
        "model": "F-150",
        "trim": "XLT",
        "mileage": 15420,
        "fuel_type": "Gasoline",
        "transmission": "Automatic",
        "drivetrain": "4WD",
        "color": "Oxford White",
        "vin": "1FTEW1EP5NKD12345",
        "stock_number": "F22-0123",
        "description": (
            "This 2022 Ford F-150 XLT is in excellent condition with low mileage. It features the "
            "3.5L EcoBoost V6 engine, 4x4 drivetrain, SYNC 4 infotainment and a 360-degree camera."
        ),
        "status": "AVAILABLE",
        "featured": True,
        "images": [PLACEHOLDER_IMAGE, PLACEHOLDER_IMAGE, PLACEHOLDER_IMAGE],
        "features": [
            "SYNC 4 with 12-inch Touchscreen",
            "360-Degree Camera",
            "Pro Power Onboard Generator",
            "Lane-Keeping System",
            "Blind Spot Information System",
            "Class IV Trailer Hitch",
        ],
    },
    {
        "title": "2021 Ford F-250 Super Duty Lariat",
        "price_cents": 5_679_900,
        "year": 2021,
        "make": "Ford",
        "model": "F-250",
        "trim": "Lariat",
        "mileage": 22150,
        "fuel_type": "Diesel",
        "transmission": "Automatic",
        "drivetrain": "4WD",
        "color": "Agate Black",
        "vin": "1FT7W2BT5MED12345",
        "stock_number": "F21-0456",
        "description": (
            "This 2021 Ford F-250 Super Duty Lariat is a powerful work truck with the Power Stroke "
            "diesel engine. Built for heavy-duty towing and hauling with luxury appointments."
        ),
        "status": "AVAILABLE",
        "featured": True,
        "images": [PLACEHOLDER_IMAGE, PLACEHOLDER_IMAGE],
        "features": [
            "Power Stroke 6.7L V8 Turbo Diesel",
            "Leather-Appointed Seating",
            "Heated and Ventilated Front Seats",
            "Trailer Tow Package",
            "FX4 Off-Road Package",
            "Adaptive Cruise Control",
        ],
    },
    {
        "title": "2023 Ford Ranger XLT",
        "price_cents": 3_650_000,
        "year": 2023,
        "make": "Ford",
        "model": "Ranger",
        "trim": "XLT",
        "mileage": 8750,
        "fuel_type": "Gasoline",
        "transmission": "Automatic",
        "drivetrain": "4WD",
        "color": "Velocity Blue",
        "vin": "1FTER4EH5NLD12345",
        "stock_number": "R23-0789",
        "description": (
            "This 2023 Ford Ranger XLT is perfect for both work and adventure. Compact yet capable, "
            "with modern technology and rugged durability."
        ),
        "status": "AVAILABLE",
        "featured": True,
        "images": [PLACEHOLDER_IMAGE, PLACEHOLDER_IMAGE],
        "features": [
            "2.3L EcoBoost Engine",
            "Terrain Management System",
            "Trail Control",
            "Pre-Collision Assist",
            "Rear View Camera",
        ],
    },
    {
        "title": "2020 Ram 2500 Tradesman",
        "listing_type": "LEASE",
        "price_cents": 0,
        "monthly_price_cents": 89_900,
        "lease_term_months": 36,
        "down_payment_cents": 250_000,
        "year": 2020,
        "make": "Ram",
        "model": "2500",
        "trim": "Tradesman",
        "mileage": 41200,
        "fuel_type": "Diesel",
        "transmission": "Automatic",
        "drivetrain": "4WD",
        "color": "Bright White",
        "vin": "3C6UR5CL4LG123456",
        "stock_number": "R20-1011",
        "description": "Work-ready Ram 2500 with the Cummins turbo diesel, available on a 36-month lease.",
        "status": "AVAILABLE",
        "featured": False,
        "images": [PLACEHOLDER_IMAGE],
        "features": ["Cummins 6.7L I6 Turbo Diesel", "Class V Hitch Receiver", "Spray-In Bedliner"],
    },
]


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--username', default='admin', help='Admin username')
@click.option('--email', default='admin@example.com', help='Admin email')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Admin password')
@with_appcontext
def init_system(username, email, password):
    """Create tables (if missing) and the first admin account."""
    click.echo("START Initializing database...")
    db.create_all()

    existing = db.session.query(User).filter_by(username=username).first()
    if existing:
        click.echo(f"WARN  User '{username}' already exists, skipping...")
        return

    try:
        user = create_user(username=username, email=email, password=password)
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {e}")
        return
    except ValueError as e:
        click.echo(f"FAIL Failed to create admin: {e}")
        return

    click.echo(f"PASS Created admin: {user.username} ({user.email})")


@system_group.command('seed')
@with_appcontext
def seed_system():
    """Insert sample trucks, inquiries and a financing application."""
    created = []
    for sample in SAMPLE_TRUCKS:
        if db.session.query(Truck).filter_by(vin=sample["vin"]).first():
            click.echo(f"WARN  Truck {sample['stock_number']} already exists, skipping...")
            continue
        created.append(inventory_service.create_truck(patch=sample))
        click.echo(f"PASS Created truck: {sample['title']} ({sample['stock_number']})")

    if created:
        db.session.add(Inquiry(
            truck_id=created[0]["id"],
            name="John Smith",
            email="john.smith@example.com",
            phone="(555) 123-4567",
            message="I'm interested in this F-150. Can we schedule a test drive?",
            inquiry_type="TEST_DRIVE",
        ))
        db.session.add(Inquiry(
            truck_id=created[-1]["id"],
            name="Sarah Johnson",
            email="sarah.johnson@example.com",
            phone="(555) 987-6543",
            message="Looking for a heavy-duty truck for my construction business.",
            inquiry_type="SALES",
        ))
        db.session.add(FinancingApplication(
            first_name="Mike",
            last_name="Wilson",
            email="mike.wilson@example.com",
            phone="(555) 456-7890",
            annual_income_cents=7_500_000,
            down_payment_cents=1_000_000,
            financing_type="traditional",
            truck_interest="pickup",
            additional_info="Looking for a reliable work truck for my landscaping business.",
        ))
        db.session.commit()
        click.echo("PASS Created sample inquiries and financing application")

    click.echo(f"DONE Seeded {len(created)} trucks")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


# =============================================================================
# USER MANAGEMENT COMMANDS
# =============================================================================

@click.group('users')
def users_group():
    """Admin account commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    users = db.session.query(User).order_by(User.id.asc()).all()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 80)
    click.echo(f"{'ID':<5} {'Username':<20} {'Email':<35} {'Active':<8} {'Last login'}")
    click.echo("=" * 80)
    for user in users:
        active_str = "yes" if user.is_active else "no"
        last_login = user.last_login_at.strftime("%Y-%m-%d %H:%M") if user.last_login_at else "-"
        click.echo(f"{user.id:<5} {user.username:<20} {user.email:<35} {active_str:<8} {last_login}")
    click.echo("=" * 80 + "\n")


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_cli(username, email, password):
    """Create an admin account."""
    try:
        user = create_user(username=username, email=email, password=password)
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {e}")
        return
    except ValueError as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(f"PASS Created user: {user.username} ({user.email})")


@users_group.command('set-password')
@click.argument('username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='New password')
@with_appcontext
def set_password_cli(username, password):
    user = db.session.query(User).filter_by(username=username).first()
    if not user:
        click.echo(f"FAIL User '{username}' not found")
        return

    try:
        set_password(user, password)
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {e}")
        return

    click.echo(f"PASS Password updated for {username}")


@users_group.command('deactivate')
@click.argument('username')
@with_appcontext
def deactivate_user_cli(username):
    """Disable an account; its sessions stop validating immediately."""
    user = db.session.query(User).filter_by(username=username).first()
    if not user:
        click.echo(f"FAIL User '{username}' not found")
        return

    user.is_active = False
    db.session.commit()
    click.echo(f"PASS Deactivated {username}")


# =============================================================================
# MAINTENANCE COMMANDS
# =============================================================================

@click.group('maintenance')
def maintenance_group():
    """Housekeeping commands."""


@maintenance_group.command('cleanup-sessions')
@with_appcontext
def cleanup_sessions_cli():
    deleted = session_service.cleanup_expired_sessions()
    click.echo(f"PASS Deleted {deleted} expired or revoked sessions")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
