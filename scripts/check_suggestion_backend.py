"""Check that the suggestion backend is reachable with the configured key.
Usage: python3 scripts/check_suggestion_backend.py   (from the project root)
"""
import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

# Load environment variables
load_dotenv()

from services.exceptions import SuggestionError  # noqa: E402
from services.suggestions import SuggestionClient  # noqa: E402


async def check_suggestion_backend() -> bool:
    api_key = os.environ.get("OPENAI_API_KEY", "")
    if not api_key:
        print("❌ OPENAI_API_KEY not found in environment")
        return False

    print(f"✓ API Key found: {api_key[:8]}...{api_key[-4:]}")
    client = SuggestionClient(api_key=api_key)

    print("\nRequesting a sample suggestion for 'reason_for_applying'...")
    try:
        text = await client.generate(
            "reason_for_applying",
            "I lost my job last month and need help paying rent for my two children.",
        )
    except SuggestionError as e:
        print(f"❌ {type(e).__name__}: {e.message}")
        return False

    print(f"\n✅ Suggestion: {text}")
    print(f"✅ Model used: {client.model}")
    return True


if __name__ == "__main__":
    print("=" * 60)
    print("Checking suggestion backend")
    print("=" * 60)
    success = asyncio.run(check_suggestion_backend())
    print("=" * 60)
    if success:
        print("✅ Suggestion backend is properly configured.")
    else:
        print("❌ Check failed. Please check your API key and billing.")
    print("=" * 60)
    sys.exit(0 if success else 1)
