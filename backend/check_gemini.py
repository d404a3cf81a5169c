#!/usr/bin/env python3
"""
Quick check of the creative audit against Gemini - connection, quota and payload.
Run from backend/: python check_gemini.py ["ad copy to audit"]

Uses GEMINI_API_KEY from .env. Prints the verdict or a diagnosis of the failure.
"""
import asyncio
import json
import sys
from pathlib import Path

# Load env before imports
from dotenv import load_dotenv
PROJECT_ROOT = Path(__file__).resolve().parent
load_dotenv(PROJECT_ROOT / ".env", override=False)

from creative_audit.config import AuditConfig, get_settings
from creative_audit.services.creative_audit import run_creative_audit
from creative_audit.services.creative_audit.errors import (
    AuditError,
    ConfigurationError,
    ProviderOverloadedError,
)

DEFAULT_TEXT = "Simple audit check: Black Friday, 50% off everything today only."


async def main():
    text = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_TEXT
    config = AuditConfig.from_settings(get_settings())

    print("Testing creative audit against Gemini")
    print(f"  Model: {config.model_name}")
    if config.api_key:
        print(f"  API key: {config.api_key[:8]}...{config.api_key[-4:]}")
    print()

    try:
        result = await run_creative_audit(text, None, config)
    except ConfigurationError as e:
        print(f"API KEY CONFIGURATION ERROR: {e.user_message}")
        sys.exit(1)
    except ProviderOverloadedError as e:
        print(f"GEMINI QUOTA ERROR (429) after {e.attempts} attempt(s): {e.user_message}")
        print("The quota has been exceeded. Wait ~1 minute or upgrade the API plan.")
        sys.exit(1)
    except AuditError as e:
        print(f"OTHER ERROR ({e.kind}): {e.user_message}")
        sys.exit(1)

    print("SUCCESS")
    print(json.dumps(result.model_dump(), indent=2, ensure_ascii=False)[:2000])


if __name__ == "__main__":
    asyncio.run(main())
