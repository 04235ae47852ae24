#!/usr/bin/env python
"""
Seed Data
Script to seed the database with a demo care plan for development
"""

import sys
import os
import argparse
import logging
import random
from datetime import datetime, timedelta, time, date
from typing import List

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import DatabaseHealthCheck, get_db_context, init_db, reset_db
from models import (
    MedicationRecord, ScheduledItemRecord, VitalReadingRecord,
    DailyObservationRecord, CareNoteRecord, TeamActivityRecord
)
from tools.care_models import ItemKind


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Medication id -> (name, dosage, daily times)
MEDICATIONS = {
    "metformin": ("Metformin", "1000mg", ["08:00", "18:00"]),
    "lisinopril": ("Lisinopril", "10mg", ["08:00"]),
    "atorvastatin": ("Atorvastatin", "20mg", ["21:00"]),
}

# Adherence rates by medication
ADHERENCE_RATES = {
    "metformin": 0.88,
    "lisinopril": 0.92,
    "atorvastatin": 0.80,  # Bedtime doses often missed
}

DAILY_ITEMS = [
    (ItemKind.VITALS, "Check blood pressure", "09:00"),
    (ItemKind.WELLNESS, "Afternoon walk", "15:00"),
    (ItemKind.NOTE, "Evening check-in note", "20:00"),
]


def create_tables(clear_existing: bool = False):
    """Create all database tables, dropping existing ones first when asked"""
    logger.info("Creating database tables...")
    if clear_existing:
        reset_db()
        logger.info("Cleared existing data")
    else:
        init_db()
    logger.info("Tables created successfully")


def seed_medications(db) -> List[MedicationRecord]:
    """Add the demo care plan medications"""
    medications = []
    for med_id, (name, dosage, _) in MEDICATIONS.items():
        existing = db.get(MedicationRecord, med_id)
        if existing:
            medications.append(existing)
            continue
        medication = MedicationRecord(id=med_id, name=name, dosage=dosage, active=True)
        db.add(medication)
        medications.append(medication)
    db.flush()
    logger.info(f"Seeded {len(medications)} medications")
    return medications


def seed_scheduled_items(db, days: int = 14):
    """Create medication doses and daily care items, with completion history"""
    logger.info(f"Creating scheduled items for {days} days...")
    random.seed(42)  # For reproducibility

    today = date.today()
    created = 0
    for day_offset in range(-1, days):  # Tomorrow through `days` ago
        item_date = today - timedelta(days=day_offset)
        is_past = day_offset > 0

        for med_id, (name, _, times) in MEDICATIONS.items():
            for sched_time in times:
                completed_at = None
                if is_past and random.random() < ADHERENCE_RATES[med_id]:
                    scheduled_dt = datetime.combine(item_date, time.fromisoformat(sched_time))
                    completed_at = scheduled_dt + timedelta(minutes=random.randint(-10, 45))
                db.add(ScheduledItemRecord(
                    id=f"{med_id}-{item_date.isoformat()}-{sched_time.replace(':', '')}",
                    kind=ItemKind.MEDICATION,
                    title=f"Take {name}",
                    scheduled_date=item_date,
                    scheduled_time=sched_time,
                    medication_id=med_id,
                    completed_at=completed_at,
                ))
                created += 1

        for kind, title, sched_time in DAILY_ITEMS:
            scheduled_dt = datetime.combine(item_date, time.fromisoformat(sched_time))
            db.add(ScheduledItemRecord(
                id=f"{kind.value}-{item_date.isoformat()}-{sched_time.replace(':', '')}",
                kind=kind,
                title=title,
                scheduled_date=item_date,
                scheduled_time=sched_time,
                completed_at=scheduled_dt + timedelta(minutes=5) if is_past else None,
            ))
            created += 1

    db.flush()
    logger.info(f"Created {created} scheduled items")


def seed_vitals_and_observations(db, days: int = 14):
    """Daily blood pressure readings and mood scores, trending down at the end"""
    today = date.today()
    for day_offset in range(days):
        day = today - timedelta(days=day_offset)
        taken_at = datetime.combine(day, time(9, 5))
        systolic = 124 + random.randint(-4, 4) + (12 if day_offset < 3 else 0)
        db.add(VitalReadingRecord(
            kind="blood_pressure", value=systolic, secondary_value=76 + random.randint(-3, 3),
            unit="mmHg", taken_at=taken_at,
        ))
        db.add(VitalReadingRecord(
            kind="heart_rate", value=72 + random.randint(-6, 6), unit="bpm", taken_at=taken_at,
        ))
        db.add(DailyObservationRecord(day=day, metric="mood", value=7 - max(0, 3 - day_offset)))
    db.flush()
    logger.info(f"Seeded {days} days of vitals and mood scores")


def seed_notes_and_activity(db):
    """A caregiver note and a few activity entries for today"""
    now = datetime.now()
    db.add(CareNoteRecord(text="Seemed tired after lunch, drank plenty of water.", author="Maria",
                          created_at=now - timedelta(hours=2)))
    for offset, category, detail in ((6, "meal", "Breakfast"), (2, "meal", "Lunch"), (1, "visit", "Nurse visit")):
        db.add(TeamActivityRecord(category=category, detail=detail, actor="Maria",
                                  created_at=now - timedelta(hours=offset)))
    db.flush()


def seed_all(clear_existing: bool = False, days: int = 14):
    """Seed the complete demo data set"""
    create_tables(clear_existing)

    try:
        with get_db_context() as db:
            if db.query(ScheduledItemRecord).count():
                logger.info("Database already seeded; use --clear to reseed")
                return

            seed_medications(db)
            seed_scheduled_items(db, days=days)
            seed_vitals_and_observations(db, days=days)
            seed_notes_and_activity(db)
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        raise

    print("\n" + "="*60)
    print("Seeding Complete!")
    print("="*60)
    print(f"\nDatabase Statistics:")
    for table, count in DatabaseHealthCheck.get_table_counts().items():
        print(f"  {table}: {count}")


def main():
    parser = argparse.ArgumentParser(
        description="Seed the database with a demo care plan"
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Clear existing data before seeding"
    )
    parser.add_argument(
        "--days",
        type=int,
        default=14,
        help="Days of history to generate"
    )

    args = parser.parse_args()

    seed_all(clear_existing=args.clear, days=args.days)


if __name__ == "__main__":
    main()
