import logging
import os
import sys

from dotenv import load_dotenv

from achievetrack.config import get_database_url
from achievetrack.schemas import Profile, UserRole
from achievetrack.store import AchievementStore

# Force reload of .env
load_dotenv(override=True)


def init_database():
    db_url = get_database_url()
    print(f"🔄 Initialising: {db_url.split('@')[-1]}")  # Print only host for privacy

    try:
        store = AchievementStore.from_url(db_url)
        store.init_db()
        print("✅ Tables created (achievements, verification_events, profiles)")
    except Exception as e:
        print(f"\n❌ INITIALISATION FAILED: {str(e)}")
        sys.exit(1)

    # Optional bootstrap admin so the verification queue has a reviewer
    admin_principal = os.getenv("ADMIN_PRINCIPAL")
    if not admin_principal:
        print("ℹ️  ADMIN_PRINCIPAL not set, skipping admin bootstrap")
        return

    if store.get_profile(admin_principal) is not None:
        print(f"✅ Admin profile already present for {admin_principal}")
        return

    store.insert_profile(
        Profile(
            principal=admin_principal,
            role=UserRole.ADMIN,
            name=os.getenv("ADMIN_NAME", "Administrator"),
            email=os.getenv("ADMIN_EMAIL", "admin@example.edu"),
        )
    )
    print(f"✅ Admin profile created for {admin_principal}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
