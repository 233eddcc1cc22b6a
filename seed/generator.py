"""
seed/generator.py - Synthetic Advocate Generator

Builds realistic-looking advocate records from fixed pools of names, cities,
degrees and specialties, and bulk inserts them in batches.

Usage:
    python -m seed.generator 5000
"""

import argparse
import logging
import random
import sys
import time
from typing import List, Optional

from sqlalchemy.orm import Session

import crud
import models
from config import Settings, DEFAULT_SEED_COUNT, SEED_BATCH_SIZE
from database import build_engine, build_session_factory
from schemas import AdvocateCreate
from seed.advocates import SPECIALTIES

logger = logging.getLogger(__name__)

# ==============================================================================
# DATA POOLS
# ==============================================================================

FIRST_NAMES = [
    "James", "Mary", "John", "Patricia", "Robert", "Jennifer", "Michael", "Linda",
    "William", "Barbara", "David", "Elizabeth", "Richard", "Susan", "Joseph", "Jessica",
    "Thomas", "Sarah", "Charles", "Karen", "Christopher", "Nancy", "Daniel", "Lisa",
    "Matthew", "Betty", "Anthony", "Margaret", "Mark", "Sandra", "Donald", "Ashley",
    "Steven", "Kimberly", "Paul", "Emily", "Andrew", "Donna", "Joshua", "Michelle",
    "Kenneth", "Dorothy", "Kevin", "Carol", "Brian", "Amanda", "George", "Melissa",
    "Edward", "Deborah", "Ronald", "Stephanie", "Timothy", "Rebecca", "Jason", "Sharon",
    "Jeffrey", "Laura", "Ryan", "Cynthia", "Jacob", "Kathleen", "Gary", "Amy",
    "Nicholas", "Shirley", "Eric", "Angela", "Jonathan", "Helen", "Stephen", "Anna",
    "Larry", "Brenda", "Justin", "Pamela", "Scott", "Nicole", "Brandon", "Emma",
    "Benjamin", "Samantha", "Samuel", "Katherine", "Raymond", "Christine", "Gregory", "Debra",
    "Frank", "Rachel", "Alexander", "Catherine", "Patrick", "Carolyn", "Jack", "Janet",
    "Dennis", "Ruth", "Jerry", "Maria", "Tyler", "Heather", "Aaron", "Diane",
    "Jose", "Virginia", "Adam", "Julie", "Henry", "Joyce", "Nathan", "Victoria",
    "Douglas", "Olivia", "Zachary", "Kelly", "Peter", "Christina", "Kyle", "Lauren",
    "Walter", "Joan", "Ethan", "Evelyn", "Jeremy", "Judith", "Harold", "Megan",
    "Keith", "Cheryl", "Christian", "Andrea", "Roger", "Hannah", "Noah", "Martha",
    "Gerald", "Jacqueline", "Carl", "Frances", "Terry", "Gloria", "Sean", "Ann",
    "Austin", "Teresa", "Arthur", "Kathryn", "Lawrence", "Sara", "Jesse", "Janice",
    "Dylan", "Jean", "Bryan", "Alice", "Joe", "Madison", "Jordan", "Doris",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas",
    "Taylor", "Moore", "Jackson", "Martin", "Lee", "Perez", "Thompson", "White",
    "Harris", "Sanchez", "Clark", "Ramirez", "Lewis", "Robinson", "Walker", "Young",
    "Allen", "King", "Wright", "Scott", "Torres", "Nguyen", "Hill", "Flores",
    "Green", "Adams", "Nelson", "Baker", "Hall", "Rivera", "Campbell", "Mitchell",
    "Carter", "Roberts", "Gomez", "Phillips", "Evans", "Turner", "Diaz", "Parker",
    "Cruz", "Edwards", "Collins", "Reyes", "Stewart", "Morris", "Morales", "Murphy",
    "Cook", "Rogers", "Gutierrez", "Ortiz", "Morgan", "Cooper", "Peterson", "Bailey",
    "Reed", "Kelly", "Howard", "Ramos", "Kim", "Cox", "Ward", "Richardson",
    "Watson", "Brooks", "Chavez", "Wood", "James", "Bennett", "Gray", "Mendoza",
    "Ruiz", "Hughes", "Price", "Alvarez", "Castillo", "Sanders", "Patel", "Myers",
    "Long", "Ross", "Foster", "Jimenez", "Powell", "Jenkins", "Perry", "Russell",
    "Sullivan", "Bell", "Coleman", "Butler", "Henderson", "Barnes", "Gonzales", "Fisher",
    "Vasquez", "Simmons", "Romero", "Jordan", "Patterson", "Alexander", "Hamilton", "Graham",
    "Reynolds", "Griffin", "Wallace", "Moreno", "West", "Cole", "Hayes", "Bryant",
    "Herrera", "Gibson", "Ellis", "Tran", "Medina", "Aguilar", "Stevens", "Murray",
    "Ford", "Castro", "Marshall", "Owens", "Harrison", "Fernandez", "McDonald", "Woods",
    "Washington", "Kennedy", "Wells", "Vargas", "Henry", "Chen", "Freeman", "Webb",
    "Tucker", "Guzman", "Burns", "Crawford", "Olson", "Simpson", "Porter", "Hunter",
]

CITIES = [
    "New York", "Los Angeles", "Chicago", "Houston", "Phoenix", "Philadelphia", "San Antonio",
    "San Diego", "Dallas", "San Jose", "Austin", "Jacksonville", "Fort Worth", "Columbus",
    "San Francisco", "Charlotte", "Indianapolis", "Seattle", "Denver", "Washington",
    "Boston", "El Paso", "Detroit", "Nashville", "Portland", "Memphis", "Oklahoma City",
    "Las Vegas", "Louisville", "Baltimore", "Milwaukee", "Albuquerque", "Tucson", "Fresno",
    "Sacramento", "Kansas City", "Long Beach", "Mesa", "Atlanta", "Colorado Springs",
    "Virginia Beach", "Raleigh", "Omaha", "Miami", "Oakland", "Minneapolis", "Tulsa",
    "Wichita", "New Orleans", "Arlington", "Cleveland", "Bakersfield", "Tampa", "Aurora",
    "Honolulu", "Anaheim", "Santa Ana", "Corpus Christi", "Riverside", "St. Louis",
]

DEGREES = ["MD", "PhD", "PsyD", "MSW", "LCSW", "LMFT", "LPC", "NP"]

MIN_SPECIALTIES = 1
MAX_SPECIALTIES = 5
MIN_EXPERIENCE = 1
MAX_EXPERIENCE = 40


# ==============================================================================
# GENERATION
# ==============================================================================

def _random_specialties(rng: random.Random) -> List[str]:
    count = rng.randint(MIN_SPECIALTIES, MAX_SPECIALTIES)
    return rng.sample(SPECIALTIES, count)


def _random_phone_number(rng: random.Random) -> str:
    area_code = rng.randint(200, 999)
    prefix = rng.randint(200, 999)
    line_number = rng.randint(1000, 9999)
    return f"{area_code}{prefix}{line_number}"


def generate_advocates(count: int, rng: Optional[random.Random] = None) -> List[AdvocateCreate]:
    """
    Generate ``count`` synthetic advocates.

    Args:
        count: Number of records to build
        rng: Random source (pass a seeded Random for reproducible data)

    Returns:
        list: AdvocateCreate records ready for insertion
    """
    rng = rng or random.Random()

    return [
        AdvocateCreate(
            first_name=rng.choice(FIRST_NAMES),
            last_name=rng.choice(LAST_NAMES),
            city=rng.choice(CITIES),
            degree=rng.choice(DEGREES),
            specialties=_random_specialties(rng),
            years_of_experience=rng.randint(MIN_EXPERIENCE, MAX_EXPERIENCE),
            phone_number=_random_phone_number(rng),
        )
        for _ in range(count)
    ]


def seed_large_dataset(
        db: Session,
        count: int = DEFAULT_SEED_COUNT,
        batch_size: int = SEED_BATCH_SIZE,
        rng: Optional[random.Random] = None
) -> int:
    """
    Generate and insert ``count`` advocates in batches.

    Each batch is committed on its own, so a failure part way through leaves
    the earlier batches in place.

    Args:
        db: Database session
        count: Number of advocates to generate
        batch_size: Rows per insert
        rng: Random source

    Returns:
        int: Number of advocates inserted

    Raises:
        RuntimeError: If database error occurs
    """
    logger.info(f"Generating {count} advocate records...")
    advocates = generate_advocates(count, rng)

    start_time = time.time()
    inserted = 0

    for start in range(0, len(advocates), batch_size):
        batch = advocates[start:start + batch_size]
        crud.bulk_create_advocates(db, batch, refresh=False)
        inserted += len(batch)
        logger.info(f"Inserted {inserted}/{count} records...")

    duration = time.time() - start_time
    logger.info(f"Seeded {inserted} advocates in {duration:.2f} seconds")

    return inserted


# ==============================================================================
# COMMAND LINE
# ==============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the advocates table with generated records")
    parser.add_argument("count", nargs="?", type=int, default=DEFAULT_SEED_COUNT,
                        help="Number of advocates to generate")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    if not 1 <= args.count <= settings.max_seed_count:
        logger.error(f"Count must be between 1 and {settings.max_seed_count:,}")
        return 1

    engine = build_engine(settings)
    models.Base.metadata.create_all(bind=engine)
    session_factory = build_session_factory(engine)

    db = session_factory()
    try:
        seed_large_dataset(db, args.count, settings.seed_batch_size)
    except RuntimeError as exc:
        logger.error(f"Error seeding database: {exc}")
        return 1
    finally:
        db.close()
        engine.dispose()

    logger.info("Seeding complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
