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
"""GLPK solver interface for LP"""

from scipy import sparse
from numpy import nan, inf, isinf
from fluxspan.names import *
from typing import Tuple, List
from swiglpk import *
import logging


class GLPK_LP():
    """GLPK interface for LP
    
    This class is a wrapper for the GLPK-Python API to offer bindings and namings
    for functions for the construction and manipulation of LPs in an
    vector-matrix-based manner that are consistent with those of the other solver 
    interfaces in the fluxspan package.
    
    Accepts a linear problem in the form:
        minimize(c),
        subject to: 
        A_ineq * x <= b_ineq,
        A_eq * x  = b_eq,
        lb <= x <= ub
                    
    Please ensure that the number of variables and (in)equalities is consistent
        
    Example: 
        glpk = GLPK_LP(c, A_ineq, b_ineq, A_eq, b_eq, lb, ub)
                
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
            (GLPK_LP):
            
            A GLPK LP interface class.
    """

    def __init__(self, c, A_ineq, b_ineq, A_eq, b_eq, lb, ub):
        self.glpk = glp_create_prob()
        # Careful with indexing! GLPK indexing starts with 1 and not with 0
        numvars = A_eq.shape[1]
        if numvars > 0:
            glp_add_cols(self.glpk, numvars)
        for i in range(numvars):
            glp_set_col_kind(self.glpk, i + 1, GLP_CV)
            self._set_col_bnds(i, lb[i], ub[i])

        # set objective
        glp_set_obj_dir(self.glpk, GLP_MIN)
        for i, c_i in enumerate(c):
            glp_set_obj_coef(self.glpk, i + 1, float(c_i))

        # stack all problem rows and add constraints
        if A_ineq.shape[0] + A_eq.shape[0] > 0:
            glp_add_rows(self.glpk, A_ineq.shape[0] + A_eq.shape[0])
            eq_type = [GLP_UP] * len(b_ineq) + [GLP_FX] * len(b_eq)
            for i, t, b in zip(range(len(b_ineq + b_eq)), eq_type, b_ineq + b_eq):
                if isinf(b):
                    glp_set_row_bnds(self.glpk, i + 1, GLP_FR, -inf, inf)
                else:
                    glp_set_row_bnds(self.glpk, i + 1, t, float(b), float(b))

            A = sparse.vstack((A_ineq, A_eq), 'coo')
            ia = intArray(A.nnz + 1)
            ja = intArray(A.nnz + 1)
            ar = doubleArray(A.nnz + 1)
            for i, row, col, data in zip(range(A.nnz), A.row, A.col, A.data):
                ia[i + 1] = int(row) + 1
                ja[i + 1] = int(col) + 1
                ar[i + 1] = float(data)
            if A.nnz:
                glp_load_matrix(self.glpk, A.nnz, ia, ja, ar)

        # LP simplex parameters
        self.lp_params = glp_smcp()
        glp_init_smcp(self.lp_params)
        self.max_tlim = self.lp_params.tm_lim
        self.lp_params.tol_bnd = 1e-9
        self.lp_params.msg_lev = GLP_MSG_OFF

    def __del__(self):
        glp_delete_prob(self.glpk)

    def solve(self) -> Tuple[List, float, str]:
        """Solve the LP
        
        Example:
            sol_x, optim, status = glpk.solve()
        
        Returns:
            (Tuple[List, float, str])
            
            solution_vector, optimal_value, optimization_status
        """
        min_cx, status = self.slim_solve()
        if status == OPTIMAL:
            x = [glp_get_col_prim(self.glpk, i + 1) for i in range(glp_get_num_cols(self.glpk))]
        else:
            x = [nan] * glp_get_num_cols(self.glpk)
        return x, min_cx, status

    def slim_solve(self) -> Tuple[float, str]:
        """Solve the LP, but return only the optimal value and the status
                
        Example:
            optim, status = glpk.slim_solve()
        
        Returns:
            (Tuple[float, str])
            
            optimal_value, optimization_status
        """
        try:
            ret, status = self.solve_LP()
            if ret == GLP_ETMLIM:
                return nan, TIME_LIMIT
            if status == GLP_OPT:
                return glp_get_obj_val(self.glpk), OPTIMAL
            elif status in [GLP_INFEAS, GLP_NOFEAS]:
                return nan, INFEASIBLE
            elif status == GLP_UNBND:
                return -inf, UNBOUNDED
            else:
                logging.error('GLPK returned the code ' + str(ret) + ' with status ' + str(status) + '.')
                return nan, ERROR
        except Exception as e:
            logging.error('Error while running GLPK: ' + str(e))
            return nan, ERROR

    def solve_LP(self) -> Tuple[int, int]:
        """Trigger GLPK solution through backend"""
        ret = glp_simplex(self.glpk, self.lp_params)
        # There is a GLPK bug where feasible LPs fail initialy but can complete when presolved
        # in these cases, glp_simplex returns GLP_EFAIL. We capture these cases and solve again
        # with prior resolve.
        if ret == GLP_EFAIL:
            self.lp_params.presolve = GLP_ON
            self.lp_params.meth = GLP_DUALP
            ret = glp_simplex(self.glpk, self.lp_params)
            self.lp_params.presolve = GLP_OFF
            self.lp_params.meth = GLP_PRIMAL
        # with presolver, infeasibility and unboundedness are only reported through the return code
        if ret == GLP_ENOPFS:
            return ret, GLP_NOFEAS
        if ret == GLP_ENODFS:
            return ret, GLP_UNBND
        return ret, glp_get_status(self.glpk)

    def set_objective(self, c):
        """Set the objective function with a vector"""
        for i, c_i in enumerate(c):
            glp_set_obj_coef(self.glpk, i + 1, float(c_i))

    def set_objective_idx(self, C):
        """Set the objective function with index-value pairs
        
        e.g.: C=[[1, 1.0], [4,-0.2]]"""
        for c in C:
            glp_set_obj_coef(self.glpk, c[0] + 1, float(c[1]))

    def set_bounds_idx(self, B):
        """Set variable bounds with index-bounds pairs
        
        e.g.: B=[[1, 0.0, 10.0], [4, -inf, 0.0]]"""
        for i, l, u in B:
            self._set_col_bnds(i, l, u)

    def set_time_limit(self, t):
        """Set the computation time limit (in seconds)"""
        if t * 1000 > self.max_tlim:
            self.lp_params.tm_lim = self.max_tlim
        else:
            self.lp_params.tm_lim = int(t * 1000)

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
        numrows = self._add_rows(A_ineq)
        for j, b in enumerate(b_ineq):
            if isinf(b):
                glp_set_row_bnds(self.glpk, numrows + j + 1, GLP_FR, -inf, inf)
            else:
                glp_set_row_bnds(self.glpk, numrows + j + 1, GLP_UP, -inf, float(b))

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
        numrows = self._add_rows(A_eq)
        for j, b in enumerate(b_eq):
            glp_set_row_bnds(self.glpk, numrows + j + 1, GLP_FX, float(b), float(b))

    def _add_rows(self, A) -> int:
        """Append the rows of A to the constraint matrix and return the previous row count"""
        A = sparse.csr_matrix(A)
        numvars = glp_get_num_cols(self.glpk)
        numrows = glp_get_num_rows(self.glpk)
        if A.shape[0] == 0:
            return numrows
        glp_add_rows(self.glpk, A.shape[0])
        col = intArray(numvars + 1)
        val = doubleArray(numvars + 1)
        for j in range(A.shape[0]):
            row = A.getrow(j)
            for k, (i, v) in enumerate(zip(row.indices, row.data)):
                col[k + 1] = int(i) + 1
                val[k + 1] = float(v)
            glp_set_mat_row(self.glpk, numrows + j + 1, row.nnz, col, val)
        return numrows

    def _set_col_bnds(self, i, l, u):
        """Set the bounds of column i and pick the matching GLPK bound type"""
        l = float(l)
        u = float(u)
        if isinf(l) and isinf(u):
            glp_set_col_bnds(self.glpk, i + 1, GLP_FR, 0.0, 0.0)
        elif not isinf(l) and isinf(u):
            glp_set_col_bnds(self.glpk, i + 1, GLP_LO, l, 0.0)
        elif isinf(l) and not isinf(u):
            glp_set_col_bnds(self.glpk, i + 1, GLP_UP, 0.0, u)
        elif l < u:
            glp_set_col_bnds(self.glpk, i + 1, GLP_DB, l, u)
        else:
            glp_set_col_bnds(self.glpk, i + 1, GLP_FX, l, u)
