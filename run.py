#!/usr/bin/env python3
# Copyright 2026 Justin Cook
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

"""
Runs the cv-compiler CLI from a source checkout without installing it:

    ./run.py compile --content cv.json --style style.json --output cv.html
"""

import sys
from pathlib import Path

# Make src/ importable relative to this file, wherever it is invoked from
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

try:
    from cv_compiler.main import main
except ImportError as e:
    print(f"Error importing cv_compiler: {e}")
    sys.exit(1)

if __name__ == "__main__":
    main()
