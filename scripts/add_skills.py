"""
python -m scripts.add_skills
"""

import sys

sys.path.insert(0, ".")

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select
from app.database import SessionLocal
from app.models.worker import Skill

SKILLS = [
    ("Elektrik", "Elektroinstallation und Reparaturen"),
    ("Sanitär", "Wasser, Abwasser und Bäder"),
    ("Heizung", "Heizungsanlagen und Wartung"),
    ("Malerarbeiten", "Innen- und Fassadenanstrich"),
    ("Schreinerei", "Türen, Fenster und Holzarbeiten"),
    ("Gartenpflege", "Grünanlagen und Winterdienst"),
    ("Reinigung", "Treppenhaus- und Gebäudereinigung"),
]


def add_skills():
    """Add the default worker skills that are not in the database yet."""
    db = SessionLocal()

    try:
        existing = set(db.execute(select(Skill.name)).scalars().all())
        added = 0
        for name, description in SKILLS:
            if name in existing:
                continue
            db.add(Skill(name=name, description=description))
            added += 1
            print(f"Added: {name}")

        db.commit()
        print(f"\nSuccessfully added {added} skills")

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    add_skills()
