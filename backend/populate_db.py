import os
import sys
from decimal import Decimal

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Database models and setup
from database import SessionLocal, init_db
from models.menu import MenuItem
from models.users import User
from utils.tokenJWT import create_access_token

# Configuration
STAFF_EMAIL = os.getenv("SEED_STAFF_EMAIL", "staff@tableorder.local")
DEMO_MENU = [
    # (name, category, price, description)
    ("Margherita", "Pizza", "32.00", "Tomato, mozzarella, basil"),
    ("Diavola", "Pizza", "38.00", "Spicy salami, chili oil"),
    ("Mixed Grill Platter", "Sharing", "100.00", "Chicken, kofta and lamb chops for the table"),
    ("Mezze Board", "Sharing", "64.00", "Hummus, baba ganoush, olives, warm pita"),
    ("Caesar Salad", "Starters", "24.50", None),
    ("Lentil Soup", "Starters", "18.00", None),
    ("Lemon Mint", "Drinks", "12.00", None),
    ("Espresso", "Drinks", "9.50", None),
]
# End Configuration

def seed_staff(session):
    """Ensures a staff account exists and returns it."""
    user = session.query(User).filter(User.email == STAFF_EMAIL).first()
    if not user:
        user = User(email=STAFF_EMAIL, role="ADMIN", first_name="Demo", last_name="Staff")
        session.add(user)
        session.flush()
        print(f"Created staff account {STAFF_EMAIL}")
    return user

def seed_menu(session):
    """Inserts the demo menu, skipping dishes that already exist by name."""
    existing = {name for (name,) in session.query(MenuItem.name).all()}
    count = 0
    for name, category, price, description in DEMO_MENU:
        if name in existing:
            continue
        session.add(MenuItem(
            name=name,
            category=category,
            price=Decimal(price),
            description=description,
            is_available=True,
        ))
        count += 1
    print(f"Inserted {count} menu items.")

def populate_database():
    """Main execution function to populate database."""
    init_db()

    session = SessionLocal()
    try:
        user = seed_staff(session)
        seed_menu(session)
        session.commit()
        print(f"Staff token: {create_access_token({'sub': user.email})}")
    finally:
        session.close()

if __name__ == "__main__":
    populate_database()
