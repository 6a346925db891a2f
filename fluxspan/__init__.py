#!/usr/bin/env python3
#
# Copyright 2022 Max Planck Insitute Magdeburg
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
#
#
#
"""fluxspan package for flux balance and flux variability analysis"""

from importlib.util import find_spec as module_exists
from .names import *

avail_solvers = set()
if module_exists("swiglpk"):
    avail_solvers.add(GLPK)
if module_exists("scipy"):
    avail_solvers.add(HIGHS)
if module_exists("pyscipopt"):
    avail_solvers.add(SCIP)

from .errors import *
from .model import *
from .parse_constr import *
from .lp_problem import *
from .solver_interface import *
from .flux_analysis import *
