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
"""SCIP (SoPlex) solver interface for LP"""

from numpy import nan, inf, isinf, isnan
import pyscipopt as pso
from fluxspan.names import *
from typing import Tuple, List
import logging


class SCIP_LP(pso.LP):
    """SoPlex interface for LP
    
    This class is a wrapper for the SoPlex-Python API to offer bindings and namings
    for functions for the construction and manipulation of LPs in an
    vector-matrix-based manner that are consistent with those of the other solver 
    interfaces in the fluxspan package.
    
    Accepts a linear problem in the form:
        minimize(c)
        subject to: A_ineq * x <= b_ineq
                    A_eq   * x  = b_eq
                    lb <= x <= ub
        
    Example: 
        scip = SCIP_LP(c, A_ineq, b_ineq, A_eq, b_eq, lb, ub)
            
    Args:
        c (list of float):
            The objective vector (Objective sense: minimization).
            
        A_ineq (sparse.csr_matrix):
            A coefficient matrix of the static inequalities.   
            
        b_ineq (list of float):
            The right hand side of the static inequalities.
            
        A_eq (sparse.csr_matrix):
            A coefficient matrix of the static equalities.   
            
        b_eq (list of float):
            The right hand side of the static equalities.
            
        lb (list of float):
            The lower variable bounds.
            
        ub (list of float):
            The upper variable bounds.
            
        Returns:
            (SCIP_LP):
            
                A SCIP LP interface class.
    """

    def __init__(self, c, A_ineq, b_ineq, A_eq, b_eq, lb, ub):
        super().__init__(sense='minimize')
        ub = [u if not isinf(u) else self.infinity() for u in ub]
        lb = [l if not isinf(l) else -self.infinity() for l in lb]
        # add variables and constraints
        if len(c):
            self.addCols([()] * len(c), objs=c, lbs=lb, ubs=ub)
        self.add_ineq_constraints(A_ineq, b_ineq)
        self.add_eq_constraints(A_eq, b_eq)
        self.optimize = super().solve

    def solve(self) -> Tuple[List, float, str]:
        """Solve the LP
        
        Example:
            sol_x, optim, status = scip.solve()
        
        Returns:
            (Tuple[List, float, str])
            
            solution_vector, optimal_value, optimization_status
        """
        min_cx, status = self.slim_solve()
        if status == OPTIMAL:
            x = self.getPrimal()
        else:
            x = [nan] * self.ncols()
        return x, min_cx, status

    def slim_solve(self) -> Tuple[float, str]:
        """Solve the LP, but return only the optimal value and the status
                
        Example:
            optim, status = scip.slim_solve()
        
        Returns:
            (Tuple[float, str])
            
            optimal_value, optimization_status
        """
        try:
            opt = self.optimize()  # this function was inherited from super().solve() during initialization
        except Exception as e:
            logging.error('Error while running SCIP: ' + str(e))
            return nan, ERROR
        if self.isInfinity(-opt):
            return -inf, UNBOUNDED
        elif self.isInfinity(opt) or isnan(opt):
            return nan, INFEASIBLE
        return opt, OPTIMAL

    def set_objective(self, c):
        """Set the objective function with a vector"""
        for i in range(len(c)):
            self.chgObj(i, c[i])

    def set_objective_idx(self, C):
        """Set the objective function with index-value pairs
        
        e.g.: C=[[1, 1.0], [4,-0.2]]"""
        for i_v in C:
            self.chgObj(i_v[0], i_v[1])

    def set_bounds_idx(self, B):
        """Set variable bounds with index-bounds pairs
        
        e.g.: B=[[1, 0.0, 10.0], [4, -inf, 0.0]]"""
        for i, l, u in B:
            self.chgBound(i, -self.infinity() if isinf(l) else l, self.infinity() if isinf(u) else u)

    def set_time_limit(self, t):
        """Time limits are not supported by the SoPlex LP interface"""
        if not isinf(t):
            logging.warning('The SCIP LP interface does not support time limits. The limit is ignored.')

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
        if A_ineq.shape[0]:
            self.addRows([[(i,v) for i,v in zip(rows.indices,rows.data)] for rows in A_ineq], \
                         lhss = [-self.infinity()]*A_ineq.shape[0],\
                         rhss = [b if not isinf(b) else self.infinity() for b in b_ineq])

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
        if A_eq.shape[0]:
            self.addRows([[(i,v) for i,v in zip(rows.indices,rows.data)] for rows in A_eq], \
                         lhss = b_eq,\
                         rhss = b_eq)
