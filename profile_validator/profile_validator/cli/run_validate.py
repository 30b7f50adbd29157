#!/usr/bin/env python3
# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""CLI entry point for validating data files against registered profiles."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config.loader import load_document, load_registry
from ..exceptions import ProfileValidatorError
from ..utils.logging_utils import configure_cli_logging
from ..validator import ValidationResult, Validator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG_ERROR = 2


def _flatten(tree: Dict[str, Any], prefix: str = "") -> List[str]:
    """Render an error tree as ``path: code[, code]`` lines."""
    lines = []
    codes = []
    for key, value in tree.items():
        if isinstance(value, dict):
            lines.extend(_flatten(value, f"{prefix}.{key}" if prefix else str(key)))
        elif value:
            codes.append(str(key))
    if codes:
        lines.insert(0, f"{prefix or '<root>'}: {', '.join(codes)}")
    return lines


def validate_files(validator: Validator, profile: str, paths: List[Path]) -> Dict[Path, ValidationResult]:
    results = {}
    for path in paths:
        data = load_document(path, kind="Data")
        results[path] = asyncio.run(validator.validate_async(profile, data))
    return results


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the validation CLI."""
    parser = argparse.ArgumentParser(
        description='Validate JSON or YAML data files against a validation profile',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'paths',
        nargs='+',
        help='Data files to validate (.json, .yaml or .yml)',
    )
    parser.add_argument(
        '--config',
        required=True,
        help='Profile configuration file declaring profiles and replacement rules',
    )
    parser.add_argument(
        '--profile',
        required=True,
        help='Name of the profile to validate against',
    )
    parser.add_argument(
        '--format',
        choices=['human', 'json'],
        default='human',
        help='Output format (default: human)',
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging',
    )

    args = parser.parse_args(argv)
    configure_cli_logging(args.verbose, stderr_only=args.format == 'json')

    try:
        validator = Validator(load_registry(args.config))
        results = validate_files(validator, args.profile, [Path(p) for p in args.paths])
    except ProfileValidatorError as e:
        logger.error(str(e))
        sys.exit(EXIT_CONFIG_ERROR)

    if args.format == 'json':
        output = {
            'profile': args.profile,
            'files': len(results),
            'invalid': sum(1 for r in results.values() if r.errors is not None),
            'results': [
                {'file': str(path), 'errors': result.errors}
                for path, result in results.items()
            ],
        }
        print(json.dumps(output, indent=2))
    else:  # human-readable
        for path, result in results.items():
            if result.errors is None:
                print(f"{path}: OK")
                continue
            print(f"{path}:")
            for line in _flatten(result.errors):
                print(f"  ERROR: {line}")

    if any(r.errors is not None for r in results.values()):
        sys.exit(EXIT_INVALID)
    sys.exit(EXIT_OK)


if __name__ == '__main__':
    main()
