#!/usr/bin/env python
"""
Test runner script for the whole backend
Usage: python run_tests.py [app label ...]
"""
import os
import sys
import django
from django.conf import settings
from django.test.utils import get_runner

DEFAULT_LABELS = [
    'backend.core',
    'backend.locations',
    'backend.catalog',
    'backend.inventory',
    'backend.public',
    'backend.pricing',
]

if __name__ == "__main__":
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'backend.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    failures = test_runner.run_tests(sys.argv[1:] or DEFAULT_LABELS)
    sys.exit(bool(failures))
