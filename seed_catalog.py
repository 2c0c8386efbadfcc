import argparse
import logging
import random

from sqlalchemy.orm import Session

from database import SessionLocal, engine, Base
from models import Category, Product

logger = logging.getLogger(__name__)

products_list = [
    ("Trimax Pen", "Pen", 10),
    ("Reynolds Pen", "Pen", 20),
    ("Parker Pen", "Pen", 250),
    ("Classmate Notebook 200 Pages", "Notebook", 120),
    ("Spiral Notebook", "Notebook", 180),
    ("Apsara Pencil Pack", "Pencil", 60),
    ("Camel Water Colors", "Art", 180),
    ("Oil Pastels", "Art", 150),
    ("Stapler Small", "Office", 120),
    ("Sticky Notes", "Office", 60),
    ("Permanent Marker", "Marker", 50),
    ("Scientific Calculator", "Exam", 850),
    ("Geometry Box", "Exam", 200),
    ("Ring Binder File", "File", 150),
    ("A4 Sheets Bundle", "Paper", 200),
    ("Desk Organizer", "Accessories", 300),
]


def seed(db: Session, reset: bool = False, extra: int = 0) -> int:
    """Insert the demo catalog and return the number of products added."""
    if reset:
        db.query(Product).delete()
        db.query(Category).delete()
        db.commit()

    rows = list(products_list)
    # add more random products
    for i in range(1, extra + 1):
        rows.append((f"Custom Notebook {i}", "Notebook", random.randint(50, 300)))

    categories = {c.name_key: c for c in db.query(Category).all()}
    added = 0
    for name, cat, price in rows:
        category = categories.get(cat.lower())
        if category is None:
            category = Category(name=cat, name_key=cat.lower())
            db.add(category)
            db.flush()
            categories[category.name_key] = category

        if db.query(Product).filter(Product.name == name, Product.category_id == category.id).first():
            continue
        db.add(Product(name=name, price=price, category_id=category.id, in_stock=random.random() > 0.2))
        added += 1

    db.commit()
    return added


def main():
    parser = argparse.ArgumentParser(description="Fill the database with a demo catalog")
    parser.add_argument("--reset", action="store_true", help="delete existing products and categories first")
    parser.add_argument("--extra", type=int, default=0, help="number of random products to add")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        added = seed(db, reset=args.reset, extra=args.extra)
    finally:
        db.close()

    logger.info("Inserted %d products", added)


if __name__ == "__main__":
    main()
