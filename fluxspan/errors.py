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
"""Exceptions raised while building and solving flux problems"""

from fluxspan.names import *


class FluxSpanError(Exception):
    """Base exception for fluxspan."""
    pass


class ConstructionError(FluxSpanError):
    """Raised when a model cannot be translated into an LP problem.

    This covers reactions that reference unknown species, inverted flux bounds,
    duplicate identifiers and malformed additional constraints. It is always
    raised before any solver is invoked."""
    pass


class SolverError(FluxSpanError):
    """Raised when the solver backend returns no optimal solution."""
    pass


class InfeasibleError(SolverError):
    """Raised when the LP has no feasible point."""
    pass


class UnboundedError(SolverError):
    """Raised when the objective of the LP is unbounded."""
    pass


class BackendError(SolverError):
    """Raised when the solver backend fails for another reason."""
    pass


class TimeLimitError(BackendError):
    """Raised when the solver hits its time limit before reaching optimality."""
    pass


def raise_for_status(status, context=''):
    """Translate a solver status string into an exception
    
    Does nothing if status is OPTIMAL. Otherwise the matching SolverError subclass
    is raised, with context prepended to the message.
    
    Example:
        raise_for_status(status, 'FBA')
    
    Args:
        status (str):
            Status returned by a solver interface (e.g. 'optimal', 'infeasible').
            
        context (optional (str)):
            Short description of the computation, used in the error message.
    """
    if status == OPTIMAL:
        return
    prefix = context + ': ' if context else ''
    if status == INFEASIBLE:
        raise InfeasibleError(prefix + 'problem is infeasible.')
    if status == UNBOUNDED:
        raise UnboundedError(prefix + 'problem is unbounded.')
    if status == TIME_LIMIT:
        raise TimeLimitError(prefix + 'time limit reached before an optimal solution was found.')
    raise BackendError(prefix + 'solver backend failed with status ' + str(status) + '.')
