"""Demo data for a fresh marketplace."""

from protean.utils.globals import current_domain

from marketplace import operations
from marketplace.domain import logger
from marketplace.shared.principal import Role
from marketplace.user.user import User

SAMPLE_PRODUCE = [
    ("Organic Tomatoes", "Tomatoes", 2.50, 120),
    ("Fresh Carrots", "Carrots", 1.80, 200),
    ("Green Lettuce", "Lettuce", 1.50, 150),
    ("Crispy Cucumbers", "Cucumbers", 1.20, 180),
    ("Sweet Bell Peppers", "Peppers", 3.00, 90),
    ("Juicy Oranges", "Oranges", 3.50, 110),
    ("Fresh Broccoli", "Broccoli", 2.80, 75),
    ("Ripe Bananas", "Bananas", 2.00, 200),
    ("Creamy Avocados", "Avocados", 4.50, 60),
    ("Red Radishes", "Radishes", 0.90, 250),
]

DEMO_USERS = [
    ("Demo Farmer", "farmer@farmxchain.example", Role.FARMER),
    ("Demo Retailer", "retailer@farmxchain.example", Role.RETAILER),
    ("Demo Distributor", "distributor@farmxchain.example", Role.DISTRIBUTOR),
    ("Demo Customer", "customer@farmxchain.example", Role.CUSTOMER),
]


def seed_marketplace() -> dict:
    """Register the demo users and list the sample produce.

    Does nothing when products already exist. Returns counts of what was created.
    """
    users = current_domain.repository_for(User)
    farmer_email = DEMO_USERS[0][1]
    farmer = users.with_email(farmer_email)
    if farmer is not None and operations.list_products_by_producer(farmer.id):
        logger.info("Marketplace already seeded", farmer_id=str(farmer.id))
        return {"users": 0, "products": 0}

    created_users = 0
    for name, email, role in DEMO_USERS:
        if users.with_email(email) is None:
            operations.register_user(name=name, email=email, role=role.value)
            created_users += 1

    farmer = users.with_email(farmer_email)
    for name, crop_type, price, quantity in SAMPLE_PRODUCE:
        operations.list_product(farmer.principal, name=name, crop_type=crop_type, price=price, quantity=quantity)

    logger.info("Marketplace seeded", users=created_users, products=len(SAMPLE_PRODUCE))
    return {"users": created_users, "products": len(SAMPLE_PRODUCE)}
