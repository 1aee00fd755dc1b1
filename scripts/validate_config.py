#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fasting_app.config.loader import ConfigLoader
from fasting_app.config.validation import ConfigValidator


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)

    print(f"🔍 Validating {loader.config_dir / 'tracker.yaml'}...")

    try:
        merged = loader.merge_config()
    except Exception as e:
        print(f"❌ Could not read configuration: {e}")
        sys.exit(1)

    errors = ConfigValidator.validate_config(merged)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        sys.exit(1)

    for section, values in merged.items():
        print(f"\n📋 {section}")
        for key, value in values.items():
            print(f"  {key}: {value}")

    print("\n🎉 Configuration validation passed!")


if __name__ == "__main__":
    main()
