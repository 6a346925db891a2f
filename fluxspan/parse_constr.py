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
"""Functions for parsing and converting additional constraints and linear expressions"""

from typing import List, Tuple
from scipy import sparse
from fluxspan.errors import ConstructionError
import re


def parse_constraints(constr, reaction_ids) -> list:
    """Parses linear constraints written as strings
    
    Parses one or more *linear* constraints written as strings or in list form.
    
    Args:
        constr (str or list of str or list of [dict,str,float]): 
            (List of) constraints in string form.
            E.g.: ['r1 + 3*r2 = 0.3', '-5*r3 -r4 <= -0.5'] or
            '1.0 r1 + 3.0*r2 =0.3,-r4-5*r3<=-0.5' or
            [[{'r1':1.0,'r2':3.0},'=',0.3]]
            
        reaction_ids (list of str): 
            List of reaction identifiers.

    Returns:
        (list of lists): 
        List of constraints. Each constraint is a list of three elements.
        E.g.: [[{'r1':1.0,'r2':3.0},'=',0.3],[{'r3':-5.0,'r4':-1.0},'<=',-0.5],...]
    """
    if not constr:
        return []
    if type(constr) is str:
        constr = re.split(r"\n|,", constr)
    if type(constr) is not list or type(constr[0]) is dict:
        constr = [constr]
    constr = [list(c) if type(c) is tuple else c for c in constr]
    if type(constr[0]) is not list:
        constr = lineq2list(constr, reaction_ids)
    for c in constr:
        if len(c) != 3 or c[1] not in ['<=', '=', '>=']:
            raise ConstructionError("Constraints must have the form [{reaction: coefficient}, sign, float].")
        unknown = [k for k in c[0] if k not in reaction_ids]
        if unknown:
            raise ConstructionError("Constraint references unknown reaction(s): " + ", ".join(unknown) + ".")
    return constr


def lineq2list(equations, reaction_ids) -> List:
    """Translates *linear* (in)equalities to list format: [lhs,sign,rhs]
    
    equations = ['2*c - b +3*a <= 2','c - b = 0'], reaction_ids = ['a','b','c']
    
    This will be translated to [[{'a':3.0,'b':-1.0,'c':2.0},'<=',2.0],[{'b':-1.0,'c':1.0},'=',0.0]]
    
    Args:
        equations (list of str): 
            (List of) (in)equalities in string form equations=['r1 + 3*r2 = 0.3', '-5*r3 -r4 <= -0.5']
            
        reaction_ids (list of str): 
            List of reaction identifiers that are used to recognize variables in the provided
            (in)equalities

    Returns:
        (list of lists): 
        (In)equalities in the form [[{'a':3.0,'b':-1.0,'c':2.0},'<=',2.0], ...]
    """
    D = []
    for equation in equations:
        if not equation.strip():
            continue
        parts = re.split('<=|>=|=', equation)
        if len(parts) != 2:
            raise ConstructionError("Equations must contain exactly one (in)equality sign: <=,=,>=.")
        lhs, rhs = parts
        eq_sign = re.search('<=|>=|=', equation)[0]
        try:
            rhs = float(rhs)
        except ValueError:
            raise ConstructionError("Right hand side of '" + equation.strip() + "' must be a float number.")
        D.append([linexpr2dict(lhs, reaction_ids), eq_sign, rhs])
    return D


def lineqlist2mat(D, reaction_ids) -> Tuple[sparse.csr_matrix, List, sparse.csr_matrix, List]:
    """Translates *linear* (in)equalities presented in the list of lists format to matrices
    
    The reaction list defines the order of variables and thus the columns of the resulting
    matrices, the order of (in)equalities will be preserved in the output matrices. '>='
    constraints are multiplied by -1, so that all inequalities read A_ineq * x <= b_ineq.
    
    D = [[{'a':3.0,'b':-1.0,'c':2.0},'<=',2.0],[{'b':-1.0,'c':1.0},'=',0.0], [{'a':-1,'b':2.0},'>=',-2.0]]
    
    translates to
    
    A_ineq = sparse.csr_matrix([[3,-1,2],[1,-2,0]]), b_ineq = [2,2],
    A_eq = sparse.csr_matrix([[0,-1,1]]), b_eq = [0]
    
    Args:
        D (list of lists): 
            (List of) (in)equalities in the list of list form.
            
        reaction_ids (list of str): 
            List of reaction identifiers

    Returns:
        (Tuple): 
        A_ineq, b_ineq, A_eq, b_eq.
    """
    numr = len(reaction_ids)
    A_ineq = sparse.csr_matrix((0, numr))
    b_ineq = []
    A_eq = sparse.csr_matrix((0, numr))
    b_eq = []
    for d in D:
        d_expr = linexprdict2mat(d[0], reaction_ids)
        eq_sign = d[1]
        rhs = float(d[2])
        if eq_sign == '=':
            A_eq = sparse.vstack((A_eq, d_expr))
            b_eq += [rhs]
        elif eq_sign == '<=':
            A_ineq = sparse.vstack((A_ineq, d_expr))
            b_ineq += [rhs]
        elif eq_sign == '>=':
            A_ineq = sparse.vstack((A_ineq, -d_expr))
            b_ineq += [-rhs]
    return sparse.csr_matrix(A_ineq), b_ineq, sparse.csr_matrix(A_eq), b_eq


def linexpr2dict(expr, reaction_ids) -> dict:
    """Translates a linear expression into a dictionary
    
    E.g.: input: expr='2 R3 - R1', reaction_ids=['R1', 'R2', 'R3', 'R4'] translates to a dict D={'R1':-1.0, 'R3': 2.0}
    
    Args:
        expr (str): 
            Linear expression as a character string, e.g.: expr='2 R3 - R1'
            
        reaction_ids (list of str): 
            List of reaction identifiers

    Returns:
        (dict): 
        A dictionary that contains the variable names and the variable coefficients in the linear expression
    """
    expr = expr.replace('*', ' ')
    # split expression into parts and strip away special characters
    expr_parts = [re.sub(r'^(\s|-|\+|\()*|(\s|-|\+|\))*$', '', part) for part in expr.split()]
    expr_parts = [e for e in expr_parts if e != '']
    ridx = [r for r in expr_parts if r in reaction_ids]
    # 1. there must not be two numbers in a row
    # 2. there must not remain words that are not reaction identifiers
    # 3. there must be no reaction id duplicates
    last_was_number = False
    for part in expr_parts:
        if part in ridx:
            last_was_number = False
            continue
        if re.match(r'^\d*\.{0,1}\d*(e-?\d+)?$', part) is not None:
            if last_was_number:
                raise ConstructionError("Expression invalid. The expression contains at least two numbers in a row.")
            last_was_number = True
            continue
        raise ConstructionError("Expression invalid. Unknown identifier " + part + ".")
    if not len(ridx) == len(set(ridx)):
        raise ConstructionError("Reaction identifiers may only occur once in each linear expression.")
    D = {}
    for rid in ridx:
        coeff = re.search(r'(\s|^)(\s|\d|-|\+|\.|e)*?(?=' + re.escape(rid) + r'(\s|$))', expr)[0]
        coeff = re.sub(r'\s', '', coeff)
        if coeff in ['', '+']:
            coeff = 1.0
        elif coeff == '-':
            coeff = -1.0
        else:
            coeff = float(coeff)
        D.update({rid: coeff})
    return D


def linexprdict2mat(D, reaction_ids) -> sparse.csr_matrix:
    """Translates a linear expression from dict into a matrix
    
    E.g.: input: D={'R1':-1.0, 'R3': 2.0}, reaction_ids=['R1', 'R2', 'R3', 'R4'] translates into sparse matrix:  A = [-1 0 2 0]
    
    Args:
        D (dict): 
            Linear expression as a dictionary
                        
        reaction_ids (list of str): 
            List of reaction identifiers

    Returns:
        (sparse.csr_matrix): 
        A single-row coefficient matrix
    """
    A = sparse.lil_matrix((1, len(reaction_ids)))
    for k, v in D.items():
        try:
            A[0, reaction_ids.index(k)] = v
        except ValueError:
            raise ConstructionError("Expression references unknown reaction " + k + ".")
    return A.tocsr()
