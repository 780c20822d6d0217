#!/usr/bin/env python3
"""
Script to create a restaurant with a floor and a table in the database.
If the owner, restaurant or floor don't exist, they will be created.
The owner's email is also added to the allow-list so they can sign in.
"""
import sys
import uuid
from sqlmodel import select, Session

from db.session import SessionLocal
from models.allowed_emails import AllowedEmail
from models.floors import Floor, FloorType
from models.restaurants import Restaurant
from models.restaurant_tables import RestaurantTable
from models.users import User, UserRole


def get_or_create_user(
    db: Session,
    email: str = "owner@restaurant-ops.local",
    name: str = "Restaurant Owner",
    admin: bool = False
) -> User:
    """Get existing user or create a new one."""
    email = email.lower()
    user = db.exec(select(User).where(User.email == email)).first()

    if user:
        print(f"✓ Using existing user: {user.email} (ID: {user.id})")
        return user

    # Placeholder uid until the owner first signs in; login re-links by email
    user = User(
        external_uid=f"seed-{uuid.uuid4()}",
        email=email,
        name=name,
        role=UserRole.ADMIN if admin else UserRole.USER
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    print(f"✓ Created new user: {user.email} (ID: {user.id})")
    return user


def ensure_allowed(db: Session, email: str) -> None:
    """Put the email on the allow-list if it isn't already."""
    email = email.lower()
    if db.exec(select(AllowedEmail).where(AllowedEmail.email == email)).first():
        print(f"✓ Email already allowed: {email}")
        return

    db.add(AllowedEmail(email=email, description="Seeded restaurant owner", created_by="script"))
    db.commit()
    print(f"✓ Allowed email: {email}")


def get_or_create_restaurant(db: Session, name: str, owner: User) -> Restaurant:
    """Get the owner's restaurant by name or create a new one."""
    restaurant = db.exec(
        select(Restaurant).where(Restaurant.name == name, Restaurant.owner_id == owner.id)
    ).first()

    if restaurant:
        print(f"✓ Using existing restaurant: {restaurant.name} (ID: {restaurant.id})")
        return restaurant

    restaurant = Restaurant(
        name=name,
        description=f"Restaurant {name}",
        address="Main Street 1",
        phone="+96100000000",
        email=owner.email,
        owner_id=owner.id
    )
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    print(f"✓ Created new restaurant: {restaurant.name} (ID: {restaurant.id})")
    return restaurant


def get_or_create_floor(db: Session, restaurant: Restaurant, name: str = "Main Floor") -> Floor:
    """Get existing floor or create a new one."""
    floor = db.exec(
        select(Floor).where(Floor.restaurant_id == restaurant.id, Floor.name == name)
    ).first()

    if floor:
        print(f"✓ Using existing floor: {floor.name} (ID: {floor.id})")
        return floor

    floor = Floor(name=name, type=FloorType.INDOOR, restaurant_id=restaurant.id)
    db.add(floor)
    db.commit()
    db.refresh(floor)
    print(f"✓ Created new floor: {floor.name} (ID: {floor.id})")
    return floor


def get_or_create_table(
    db: Session,
    restaurant: Restaurant,
    floor: Floor,
    name: str = "T1",
    capacity: int = 4
) -> RestaurantTable:
    """Get existing table or create a new one."""
    existing_table = db.exec(
        select(RestaurantTable).where(
            RestaurantTable.restaurant_id == restaurant.id,
            RestaurantTable.name == name
        )
    ).first()

    if existing_table:
        print(f"✓ Using existing table: {name} (ID: {existing_table.id})")
        return existing_table

    table = RestaurantTable(
        restaurant_id=restaurant.id,
        floor_id=floor.id,
        name=name,
        capacity=capacity
    )
    db.add(table)
    db.commit()
    db.refresh(table)
    print(f"✓ Created new table: {name} (ID: {table.id})")
    return table


def main():
    """Main function to create restaurant, floor and table."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Create a restaurant with a floor and a table in the database"
    )
    parser.add_argument(
        "--name",
        type=str,
        default="Test Restaurant",
        help="Restaurant name (default: Test Restaurant)"
    )
    parser.add_argument(
        "--floor-name",
        type=str,
        default="Main Floor",
        help="Floor name (default: Main Floor)"
    )
    parser.add_argument(
        "--table-name",
        type=str,
        default="T1",
        help="Table name (default: T1)"
    )
    parser.add_argument(
        "--capacity",
        type=int,
        default=4,
        help="Table capacity (default: 4)"
    )
    parser.add_argument(
        "--user-email",
        type=str,
        default="owner@restaurant-ops.local",
        help="Owner user email (default: owner@restaurant-ops.local)"
    )
    parser.add_argument(
        "--user-name",
        type=str,
        default="Restaurant Owner",
        help="Owner user name (default: Restaurant Owner)"
    )
    parser.add_argument(
        "--admin",
        action="store_true",
        help="Create the owner as an admin"
    )

    args = parser.parse_args()

    # Create database session
    db = SessionLocal()

    try:
        user = get_or_create_user(db, args.user_email, args.user_name, args.admin)
        ensure_allowed(db, user.email)
        restaurant = get_or_create_restaurant(db, name=args.name, owner=user)
        floor = get_or_create_floor(db, restaurant, args.floor_name)
        table = get_or_create_table(db, restaurant, floor, args.table_name, args.capacity)

        print("\n" + "="*60)
        print("✓ Success! Restaurant, floor and table created/retrieved:")
        print("="*60)
        print(f"  Restaurant ID: {restaurant.id}")
        print(f"  Restaurant Name: {restaurant.name}")
        print(f"  Floor: {floor.name} (ID: {floor.id})")
        print(f"  Table: {table.name} (ID: {table.id}, capacity {table.capacity})")
        print(f"  Owner: {user.name} ({user.email})")
        print("="*60)
        print("\nUse this query parameter with the table endpoints:")
        print(f"  ?restaurantId={restaurant.id}")

    except Exception as e:
        print(f"✗ Error: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
