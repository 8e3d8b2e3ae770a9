"""
Attack pattern matching over correlated incident timelines.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.patterns.attack import find_attack_patterns

__all__ = ["find_attack_patterns"]
