import logging
from institute.core.database import SessionLocal, create_database_tables
from institute.models.course import Course
from institute.models.student import Student

# Setup logging to see output
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_data():
    """
    Seed a sample course and two students into an empty database.
    """
    create_database_tables()
    db = SessionLocal()
    try:
        # 1. Skip if there is already data
        if db.query(Student).first() or db.query(Course).first():
            logger.info("Database already contains data. Skipping seed.")
            return

        logger.info("Seeding data...")

        # 2. Courses
        db.add_all([
            Course(
                course_name="DCA",
                duration="6 Months",
                fees=6000,
                subjects=["Fundamentals", "MS Office", "Internet"],
            ),
            Course(
                course_name="ADCA",
                duration="12 Months",
                fees=12000,
                subjects=["Fundamentals", "MS Office", "Tally", "Programming in C"],
            ),
        ])

        # 3. Students; paid_fee starts at 0 and only moves through the fee ledger
        db.add_all([
            Student(
                enrollment_no="ESL2024001",
                password="changeme",
                name="Aarav Sharma",
                father_name="Rakesh Sharma",
                course="DCA",
                batch_time="10am",
                admission_date="2024-01-10",
                session_start="2024-01-10",
                session_end="2024-07-10",
            ),
            Student(
                enrollment_no="ESL2024002",
                password="changeme",
                name="Priya Verma",
                father_name="Sunil Verma",
                course="ADCA",
                batch_time="4pm",
                admission_date="2024-02-01",
                session_start="2024-02-01",
                session_end="2025-02-01",
            ),
        ])

        db.commit()
        logger.info("✅ Data seeded successfully!")

    except Exception as e:
        logger.error(f"❌ Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_data()
