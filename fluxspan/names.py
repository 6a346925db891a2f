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
"""Static strings used in the fluxspan package

    Solvers and status codes

        SOLVER = 'solver'

        GLPK = 'glpk'

        SCIP = 'scip'

        HIGHS = 'highs'

        SOLVER_PRIORITY = (GLPK, HIGHS, SCIP)

        OPTIMAL = 'optimal' # from optlang interface

        INFEASIBLE ='infeasible' # from optlang interface

        TIME_LIMIT = 'time_limit' # from optlang interface

        UNBOUNDED = 'unbounded' # from optlang interface

        ERROR = 'error'

    Analysis

        CONSTRAINTS = 'constraints'

        OBJECTIVE = 'obj'

        OBJ_SENSE = 'obj_sense'

        MAXIMIZE = 'maximize'

        MINIMIZE = 'minimize'

        T_LIMIT = 'tlim'

        PROCESSES = 'processes'

        FRACTION_OF_OPTIMUM = 'fraction_of_optimum'

        MINIMUM = 'minimum'

        MAXIMUM = 'maximum'
"""

# Solvers and status codes
SOLVER = 'solver'
GLPK = 'glpk'
SCIP = 'scip'
HIGHS = 'highs'
SOLVER_PRIORITY = (GLPK, HIGHS, SCIP)
from optlang.interface import OPTIMAL,    \
                              INFEASIBLE, \
                              TIME_LIMIT, \
                              UNBOUNDED

ERROR = 'error'

# Analysis
CONSTRAINTS = 'constraints'
OBJECTIVE = 'obj'
OBJ_SENSE = 'obj_sense'
MAXIMIZE = 'maximize'
MINIMIZE = 'minimize'
T_LIMIT = 'tlim'
PROCESSES = 'processes'
FRACTION_OF_OPTIMUM = 'fraction_of_optimum'
MINIMUM = 'minimum'
MAXIMUM = 'maximum'
