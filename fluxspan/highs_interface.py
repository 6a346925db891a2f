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
"""HiGHS solver interface for LP (through scipy.optimize.linprog)"""

from scipy import sparse
from scipy.optimize import linprog
from numpy import nan, inf, isinf
from fluxspan.names import *
from typing import Tuple, List
import logging


class HiGHS_LP():
    """HiGHS interface for LP
    
    This class wraps the HiGHS solver that ships with scipy (scipy.optimize.linprog)
    and offers the same bindings as the other solver interfaces in the fluxspan
    package. Since linprog is stateless, the problem data is kept in this object and
    handed to HiGHS on every solve. HiGHS is always available when scipy is
    installed and is therefore a dependable fallback.
    
    Accepts a linear problem in the form:
        minimize(c),
        subject to: 
        A_ineq * x <= b_ineq,
        A_eq * x  = b_eq,
        lb <= x <= ub
        
    Example: 
        highs = HiGHS_LP(c, A_ineq, b_ineq, A_eq, b_eq, lb, ub)
                
    Args:
        c, A_ineq, b_ineq, A_eq, b_eq, lb, ub:
            The LP (see LP_Interface).
            
        Returns:
            (HiGHS_LP):
            
            A HiGHS LP interface class.
    """

    def __init__(self, c, A_ineq, b_ineq, A_eq, b_eq, lb, ub):
        self.c = [float(v) for v in c]
        self.A_ineq = sparse.csr_matrix(A_ineq)
        self.b_ineq = [float(v) for v in b_ineq]
        self.A_eq = sparse.csr_matrix(A_eq)
        self.b_eq = [float(v) for v in b_eq]
        self.lb = [float(v) for v in lb]
        self.ub = [float(v) for v in ub]
        self.options = {}

    def solve(self) -> Tuple[List, float, str]:
        """Solve the LP
        
        Example:
            sol_x, optim, status = highs.solve()
        
        Returns:
            (Tuple[List, float, str])
            
            solution_vector, optimal_value, optimization_status
        """
        numvars = len(self.c)
        if numvars == 0:
            return [], 0.0, OPTIMAL
        try:
            result = self.solve_LP(presolve=True)
            # HiGHS' presolver cannot always tell infeasible from unbounded problems
            if result.status == 4:
                result = self.solve_LP(presolve=False)
        except Exception as e:
            logging.error('Error while running HiGHS: ' + str(e))
            return [nan] * numvars, nan, ERROR
        if result.status == 0:
            return list(result.x), float(result.fun), OPTIMAL
        elif result.status == 1:
            return [nan] * numvars, nan, TIME_LIMIT
        elif result.status == 2:
            return [nan] * numvars, nan, INFEASIBLE
        elif result.status == 3:
            return [nan] * numvars, -inf, UNBOUNDED
        logging.error('HiGHS failed: ' + str(result.message))
        return [nan] * numvars, nan, ERROR

    def slim_solve(self) -> Tuple[float, str]:
        """Solve the LP, but return only the optimal value and the status
                
        Example:
            optim, status = highs.slim_solve()
        
        Returns:
            (Tuple[float, str])
            
            optimal_value, optimization_status
        """
        _, min_cx, status = self.solve()
        return min_cx, status

    def solve_LP(self, presolve=True):
        """Trigger HiGHS solution through scipy"""
        options = dict(self.options)
        options['presolve'] = presolve
        return linprog(self.c,
                       A_ub=self.A_ineq if self.A_ineq.shape[0] else None,
                       b_ub=self.b_ineq if self.A_ineq.shape[0] else None,
                       A_eq=self.A_eq if self.A_eq.shape[0] else None,
                       b_eq=self.b_eq if self.A_eq.shape[0] else None,
                       bounds=[(None if isinf(l) else l, None if isinf(u) else u) for l, u in zip(self.lb, self.ub)],
                       method='highs',
                       options=options)

    def set_objective(self, c):
        """Set the objective function with a vector"""
        self.c = [float(v) for v in c]

    def set_objective_idx(self, C):
        """Set the objective function with index-value pairs
        
        e.g.: C=[[1, 1.0], [4,-0.2]]"""
        for i, v in C:
            self.c[i] = float(v)

    def set_bounds_idx(self, B):
        """Set variable bounds with index-bounds pairs
        
        e.g.: B=[[1, 0.0, 10.0], [4, -inf, 0.0]]"""
        for i, l, u in B:
            self.lb[i] = float(l)
            self.ub[i] = float(u)

    def set_time_limit(self, t):
        """Set the computation time limit (in seconds)"""
        if isinf(t):
            self.options.pop('time_limit', None)
        else:
            self.options['time_limit'] = float(t)

    def add_ineq_constraints(self, A_ineq, b_ineq):
        """Add inequality constraints of the form A_ineq * x <= b_ineq"""
        self.A_ineq = sparse.vstack((self.A_ineq, sparse.csr_matrix(A_ineq)), 'csr')
        self.b_ineq += [float(b) for b in b_ineq]

    def add_eq_constraints(self, A_eq, b_eq):
        """Add equality constraints of the form A_eq * x = b_eq"""
        self.A_eq = sparse.vstack((self.A_eq, sparse.csr_matrix(A_eq)), 'csr')
        self.b_eq += [float(b) for b in b_eq]
