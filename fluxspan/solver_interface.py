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
"""Unified solver interface for LPs (LP_Interface)"""

from numpy import inf
from scipy import sparse
from typing import List, Tuple
from fluxspan import avail_solvers
from fluxspan.names import *
import logging


class LP_Interface(object):
    """Unified LP interface
    
    This class is a wrapper for several solver interfaces to offer unique and 
    consistent bindings for the construction and manipulation of LPs in an
    vector-matrix-based manner and their solution.
    
    Accepts a linear problem in the form:
        minimize(c),
        subject to: 
        A_ineq * x <= b_ineq,
        A_eq * x  = b_eq,
        lb <= x <= ub
                    
    Please ensure that the number of variables and (in)equalities is consistent.
    
    Solving never raises on solver failure. The status returned by solve() and
    slim_solve() is 'optimal', 'infeasible', 'unbounded', 'time_limit' or 'error'
    and is translated into exceptions by the caller (see raise_for_status).
        
    Example: 
        lp = LP_Interface(c=c, A_eq=A_eq, b_eq=b_eq, lb=lb, ub=ub, solver='glpk')
                
    Args:
        c (list of float): (Default: None)
            The objective vector (Objective sense: minimization).
            
        A_ineq (sparse.csr_matrix): (Default: None)
            A coefficient matrix of the static inequalities.   
            
        b_ineq (list of float): (Default: None)
            The right hand side of the static inequalities.
            
        A_eq (sparse.csr_matrix): (Default: None)
            A coefficient matrix of the static equalities.   
            
        b_eq (list of float): (Default: None)
            The right hand side of the static equalities.
            
        lb (list of float): (Default: None)
            The lower variable bounds.
            
        ub (list of float): (Default: None)
            The upper variable bounds.
            
        solver (str): (Default: taken from avail_solvers)
            Solver backend that should be used: 'glpk', 'highs' or 'scip'

        skip_checks (bool): (Default: False)
            Upon LP construction, the dimensions of all provided vectors and matrices
            are checked to verify their consistency. If skip_checks=True is set, these
            checks are skipped.
        
        tlim (float):
            Solution time limit in seconds.
            
        Returns:
            (LP_Interface):
            
            An LP solver interface class.
    """

    def __init__(self, **kwargs):
        allowed_keys = {'c', 'A_ineq', 'b_ineq', 'A_eq', 'b_eq', 'lb', 'ub', 'solver', 'skip_checks', 'tlim'}
        # set all keys passed in kwargs
        for key, value in kwargs.items():
            if key in allowed_keys:
                setattr(self, key, value)
            else:
                raise ValueError("Key " + key + " is not supported.")
        # set all remaining keys to None
        for key in allowed_keys:
            if key not in kwargs.keys():
                setattr(self, key, None)
        # Select solver (either by choice or automatically glpk > highs > scip)
        if self.solver is None:
            if len(avail_solvers) > 0:
                self.solver = [s for s in SOLVER_PRIORITY if s in avail_solvers][0]
            else:
                raise ValueError('No solver available. Please ensure that one of the following '\
                    'solvers is avaialable in your Python environment: GLPK (swiglpk), HiGHS (scipy), SCIP (pyscipopt)')
        elif self.solver not in avail_solvers:
            raise ValueError("Selected solver '" + str(self.solver) + "' is not installed / set up correctly.")
        # Copy parameters to object
        if self.A_ineq is not None:
            numvars = self.A_ineq.shape[1]
        elif self.A_eq is not None:
            numvars = self.A_eq.shape[1]
        elif self.c is not None:
            numvars = len(self.c)
        else:
            logging.warning('Problem has no variables.')
            numvars = 0
        if self.c is None:
            self.c = [0.0] * numvars
        if self.A_ineq is None:
            self.A_ineq = sparse.csr_matrix((0, numvars))
        if self.b_ineq is None:
            self.b_ineq = []
        if self.A_eq is None:
            self.A_eq = sparse.csr_matrix((0, numvars))
        if self.b_eq is None:
            self.b_eq = []
        if self.lb is None:
            self.lb = [-inf] * numvars
        if self.ub is None:
            self.ub = [inf] * numvars
        # check dimensions
        if not self.skip_checks:
            if not (self.A_ineq.shape[0] == len(self.b_ineq)):
                raise ValueError("A_ineq and b_ineq must have the same number of rows/elements")
            if not (self.A_eq.shape[0] == len(self.b_eq)):
                raise ValueError("A_eq and b_eq must have the same number of rows/elements")
            if not (self.A_ineq.shape[1]==numvars and self.A_eq.shape[1]==numvars and len(self.c)==numvars and \
                    len(self.lb)==numvars and len(self.ub)==numvars):
                raise ValueError("A_eq, A_ineq, c, lb, ub must have the same number of columns/elements")
        # Cast variables as float
        self.A_ineq = sparse.csr_matrix(self.A_ineq, dtype=float)
        self.A_eq = sparse.csr_matrix(self.A_eq, dtype=float)
        self.c = [float(v) for v in self.c]
        self.b_ineq = [float(v) for v in self.b_ineq]
        self.b_eq = [float(v) for v in self.b_eq]
        self.lb = [float(v) for v in self.lb]
        self.ub = [float(v) for v in self.ub]
        # Create backend
        if self.solver == GLPK:
            from fluxspan.glpk_interface import GLPK_LP
            self.backend = GLPK_LP(self.c, self.A_ineq, self.b_ineq, self.A_eq, self.b_eq, self.lb, self.ub)
        elif self.solver == SCIP:
            from fluxspan.scip_interface import SCIP_LP
            self.backend = SCIP_LP(self.c, self.A_ineq, self.b_ineq, self.A_eq, self.b_eq, self.lb, self.ub)
        elif self.solver == HIGHS:
            from fluxspan.highs_interface import HiGHS_LP
            self.backend = HiGHS_LP(self.c, self.A_ineq, self.b_ineq, self.A_eq, self.b_eq, self.lb, self.ub)
        if self.tlim is None:
            self.set_time_limit(inf)
        else:
            self.set_time_limit(self.tlim)

    @classmethod
    def from_problem(cls, problem, patch=None, **kwargs) -> 'LP_Interface':
        """Create a solver interface for an LPProblem
        
        The problem's maximization objective is negated into the minimization form
        of the interface. An optional LPPatch overrides objective coefficients and
        bounds of this interface only; the problem is not modified.
        
        Example:
            lp = LP_Interface.from_problem(problem, solver='highs')
        
        Args:
            problem (LPProblem):
                The problem built from a metabolic model.
                
            patch (optional (LPPatch)):
                An objective/bounds override.
                
            **kwargs:
                Further arguments of LP_Interface (solver, tlim, A_ineq, b_ineq).
        """
        c, lb, ub = problem.patched(patch)
        return cls(c=[-v for v in c], A_eq=problem.A_eq, b_eq=list(problem.b_eq), lb=lb, ub=ub, **kwargs)

    def solve(self) -> Tuple[List, float, str]:
        """Solve the LP
        
        Example:
            sol_x, optim, status = lp.solve()
        
        Returns:
            (Tuple[List, float, str])
            
            solution_vector, optimal_value, optimization_status
        """
        return self.backend.solve()

    def slim_solve(self) -> Tuple[float, str]:
        """Solve the LP, but return only the optimal value and the status
                
        Example:
            optim, status = lp.slim_solve()
        
        Returns:
            (Tuple[float, str])
            
            optimal_value, optimization_status
        """
        return self.backend.slim_solve()

    def set_objective(self, c):
        """Set the objective function with a vector"""
        self.c = [float(v) for v in c]
        self.backend.set_objective(self.c)

    def set_objective_idx(self, C):
        """Set the objective function with index-value pairs
        
        e.g.: C=[[1, 1.0], [4,-0.2]]"""
        # when indices occur multiple times, take first one
        seen = set()
        C = [c for c in C if not (c[0] in seen or seen.add(c[0]))]
        for i, v in C:
            self.c[i] = float(v)
        self.backend.set_objective_idx(C)

    def set_bounds_idx(self, B):
        """Set variable bounds with index-bounds triples
        
        e.g.: B=[[1, 0.0, 10.0], [4, -inf, 0.0]]"""
        for i, l, u in B:
            self.lb[i] = float(l)
            self.ub[i] = float(u)
        self.backend.set_bounds_idx(B)

    def set_time_limit(self, t):
        """Set the computation time limit (in seconds)"""
        self.tlim = t
        self.backend.set_time_limit(t)

    def add_ineq_constraints(self, A_ineq, b_ineq):
        """Add inequality constraints to the model
        
        Additional inequality constraints have the form A_ineq * x <= b_ineq.
        The number of columns in A_ineq must match with the number of variables x
        in the problem.
        
        Args:
            A_ineq (sparse.csr_matrix):
                The coefficient matrix
                
            b_ineq (list of float):
                The right hand side vector
        """
        A_ineq = sparse.csr_matrix(A_ineq, dtype=float)
        A_ineq.eliminate_zeros()
        b_ineq = [float(b) for b in b_ineq]
        self.A_ineq = sparse.vstack((self.A_ineq, A_ineq), 'csr')
        self.b_ineq += b_ineq
        self.backend.add_ineq_constraints(A_ineq, b_ineq)

    def add_eq_constraints(self, A_eq, b_eq):
        """Add equality constraints to the model
        
        Additional equality constraints have the form A_eq * x = b_eq.
        The number of columns in A_eq must match with the number of variables x
        in the problem.
        
        Args:
            A_eq (sparse.csr_matrix):
                The coefficient matrix
                
            b_eq (list of float):
                The right hand side vector
        """
        A_eq = sparse.csr_matrix(A_eq, dtype=float)
        A_eq.eliminate_zeros()
        b_eq = [float(b) for b in b_eq]
        self.A_eq = sparse.vstack((self.A_eq, A_eq), 'csr')
        self.b_eq += b_eq
        self.backend.add_eq_constraints(A_eq, b_eq)
