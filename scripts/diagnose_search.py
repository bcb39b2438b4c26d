import logging
import sys

from dotenv import load_dotenv

from achievetrack.chatbot import answer_prompt
from achievetrack.schemas import NeedsClarification
from achievetrack.store import AchievementStore

load_dotenv()

SAMPLE_PROMPTS = [
    "Show projects for student STU12345",
    "Find hackathon wins in 2024",
    "Search for machine learning projects",
    "hi",
]


def run_diagnosis(store, prompt):
    print(f"--- Diagnosing: '{prompt}' ---")
    outcome = answer_prompt(prompt, store)

    if isinstance(outcome, NeedsClarification):
        print("  ❓ CLARIFICATION")
        print("  " + outcome.message.replace("\n", "\n  "))
        return

    print(f"  Strategy: {outcome.strategy.value}")
    print(f"  Filters:  {outcome.applied_filters.model_dump(exclude_none=True)}")
    if not outcome.achievements:
        print("  NO RESULTS")
    for a in outcome.achievements:
        print(f"  [{a.status.value:>8}] {a.achievement_id} | {a.category.label} | {a.title[:40]}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    store = AchievementStore.from_url()
    store.init_db()
    for prompt in sys.argv[1:] or SAMPLE_PROMPTS:
        run_diagnosis(store, prompt)
