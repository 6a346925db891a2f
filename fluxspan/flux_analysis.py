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
"""Flux balance analysis (FBA) and flux variability analysis (FVA) on LP problems"""

from cobra.core import Solution
from cobra import Configuration
from cobra.util import ProcessPool
from scipy import sparse
from re import search
from pandas import DataFrame, Series
from typing import Tuple
from contextlib import redirect_stdout, redirect_stderr
from io import StringIO
from fluxspan import avail_solvers
from fluxspan.names import *
from fluxspan.errors import SolverError, raise_for_status
from fluxspan.lp_problem import LPProblem, LPPatch, build
from fluxspan.parse_constr import parse_constraints, lineqlist2mat, linexpr2dict
from fluxspan.solver_interface import LP_Interface
import logging


def select_solver(solver=None, model=None) -> str:
    """Select a solver for subsequent LP computations
    
    This function will determine the solver to be used for subsequent LP computations. If no
    argument is provided, this function will try to determine the currently selected solver from the
    COBRA configuration. If unavailable, one of the installed solvers is picked in the
    prioritized order: 'glpk', 'highs', 'scip'.
    One may provide a solver or a model manually. This function then checks if the selected solver 
    is available, or else, if the solver indicated in the model is available. If both arguments are
    specified, the function prefers 'solver' over 'model'.
    
    Example:
        solver = select_solver('highs')
    
    Args:
        solver (optional (str)):
            A user preferred solver, that should be checked for availability: 'glpk', 'highs'
            or 'scip'.
            
        model (optional (cobra.Model)):
            A metabolic model that is an instance of the cobra.Model class. The function will try to
            determine the selected solver by accessing the field model.solver.
            
    Returns:
        (str):
            The selected solver name as a str (one of the following: 'glpk', 'highs', 'scip').
    """
    available = [s for s in SOLVER_PRIORITY if s in avail_solvers]
    if not available:
        raise ValueError('No solver available. Please install swiglpk, scipy or pyscipopt.')
    # first try to use selected solver
    if solver:
        if solver in avail_solvers:
            return solver
        else:
            logging.warning('Selected solver ' + str(solver) + ' not available.')
    pattern = r'(' + '|'.join(available) + r')_interface'
    # if no solver was defined, use solver specified in model
    if hasattr(model, 'solver') and hasattr(model.solver, 'interface'):
        found = search(pattern, model.solver.interface.__name__)
        if found is not None:
            return found[1]
        logging.warning('Solver specified in model (' + model.solver.interface.__name__ + ') unavailable')
    # if no solver specified in model, use solver from cobra configuration
    cobra_conf = Configuration()
    if hasattr(cobra_conf.solver, '__name__'):
        found = search(pattern, cobra_conf.solver.__name__)
        if found is not None:
            return found[1]
    logging.info('Using solver ' + available[0] + '.')
    return available[0]


def _as_problem(problem) -> LPProblem:
    """Build an LPProblem if a model descriptor was passed"""
    if isinstance(problem, LPProblem):
        return problem
    return build(problem)


def _extra_constraints(constraints, reaction_ids):
    """Matrices of additional constraints, empty if none are given"""
    if constraints:
        return lineqlist2mat(parse_constraints(constraints, reaction_ids), reaction_ids)
    numr = len(reaction_ids)
    return sparse.csr_matrix((0, numr)), [], sparse.csr_matrix((0, numr)), []


def _build_lp(problem, patch, A_ineq, b_ineq, A_eq, b_eq, solver, tlim) -> LP_Interface:
    """Solver interface for a patched problem with additional constraints"""
    lp = LP_Interface.from_problem(problem, patch, A_ineq=A_ineq, b_ineq=b_ineq, solver=solver, tlim=tlim)
    if A_eq.shape[0]:
        lp.add_eq_constraints(A_eq, b_eq)
    return lp


def idx2c(col, sense, prev) -> list:
    """Helper function for parallel FVA
    
    Builds the index-addressed objective for minimizing (sense=1.0) or maximizing
    (sense=-1.0) the flux through the reaction with the index col. The coefficient of
    the previously optimized reaction is reset to zero.
    
    Args:
        col (int):
            Index of the reaction.
        sense (float):
            Objective coefficient of the reaction in the minimization form.
        prev (optional (int)):
            Index of the previously optimized reaction.
    Returns:
        (list):
            Index-value pairs of the objective.
    """
    C = [[col, sense]]
    if prev is not None and prev != col:
        C += [[prev, 0.0]]
    return C


def fva_worker_init(problem, A_ineq, b_ineq, A_eq, b_eq, solver, tlim):
    """Helper function for parallel FVA
    
    Initialize the LP that will be solved iteratively. Is executed on workers, not on main thread.
    Every worker owns its LP clone. The objective is cleared, the bounds and constraints
    are those of the shared problem.
    
    Args:
        problem (LPProblem):
            The shared LP problem.
        A_ineq, b_ineq, A_eq, b_eq:
            Additional constraints.
        solver (str):
            Solver to be used.
        tlim (float):
            Time limit per LP.
    """
    global lp_glob
    # redirect output to empty stream. Perhaps avoids some multithreading issues
    with redirect_stdout(StringIO()), redirect_stderr(StringIO()):
        lp_glob = _build_lp(problem, LPPatch(objective=[]), A_ineq, b_ineq, A_eq, b_eq, solver, tlim)
        lp_glob.reaction_ids = problem.reaction_ids
        lp_glob.prev = None


def flux_range(lp, col, prev, reaction_id) -> Tuple[float, float]:
    """Minimum and maximum flux through one reaction

    Maximizes and then minimizes the variable col of an LP whose objective holds at most
    the coefficient of the previously optimized reaction prev. Raises a SolverError if
    one of the two LPs fails.
    """
    opt = []
    for sense, direction in ((-1.0, MAXIMIZE), (1.0, MINIMIZE)):
        lp.set_objective_idx(idx2c(col, sense, prev))
        prev = col
        min_cx, status = lp.slim_solve()
        raise_for_status(status, 'FVA (' + direction + ' ' + reaction_id + ')')
        opt += [min_cx]
    return opt[1], -opt[0]


def fva_worker_compute(col) -> Tuple[int, Tuple[float, float]]:
    """Helper function for parallel FVA

    Maximize and minimize the flux through one reaction. Is executed on workers, not on
    main thread. Raises a SolverError if one of the two LPs fails.

    Args:
        col (int):
            Index of the reaction.
    """
    global lp_glob
    with redirect_stdout(StringIO()), redirect_stderr(StringIO()):
        prev = lp_glob.prev
        # the objective of col is set before the first solve, even if that solve fails
        lp_glob.prev = col
        value = flux_range(lp_glob, col, prev, lp_glob.reaction_ids[col])
    return col, value


# GLPK needs a workaround, because problems cannot be solved in a different thread
# which apparently happens with the multiprocess


def fva_worker_init_glpk(problem, A_ineq, b_ineq, A_eq, b_eq, tlim):
    """Helper function for parallel FVA
    
    Store the LP data for GLPK workers. Is executed on workers, not on main thread.
    """
    global lp_glob
    lp_glob = {'problem': problem, 'A_ineq': A_ineq, 'b_ineq': b_ineq, 'A_eq': A_eq, 'b_eq': b_eq, 'tlim': tlim}


def fva_worker_compute_glpk(col) -> Tuple[int, Tuple[float, float]]:
    """Helper function for parallel FVA
    
    Maximize and minimize the flux through one reaction with a freshly built GLPK LP.
    Is executed on workers, not on main thread.
    """
    global lp_glob
    problem = lp_glob['problem']
    with redirect_stdout(StringIO()), redirect_stderr(StringIO()):
        lp_i = _build_lp(problem, LPPatch(objective=[[col, 1.0]]), lp_glob['A_ineq'], lp_glob['b_ineq'],
                         lp_glob['A_eq'], lp_glob['b_eq'], GLPK, lp_glob['tlim'])
        neg_max_cx, status = lp_i.slim_solve()
        raise_for_status(status, 'FVA (' + MAXIMIZE + ' ' + problem.reaction_ids[col] + ')')
        lp_i.set_objective_idx([[col, 1.0]])
        min_cx, status = lp_i.slim_solve()
        raise_for_status(status, 'FVA (' + MINIMIZE + ' ' + problem.reaction_ids[col] + ')')
    return col, (min_cx, -neg_max_cx)


def fba(problem, solver=None, **kwargs) -> Solution:
    """Flux Balance Analysis (FBA)
    
    Flux Balance Analysis optimizes a *linear objective function* in a space of steady-state
    flux vectors given by a constraint-based metabolic model. By default, the objective
    coefficients of the model are maximized. The LP is solved exactly once and the problem
    is not modified, so repeated calls on the same problem return the same solution.
    
    Example:
        sol = fba(problem, solver='glpk', constraints='EX_o2_e = 0')
        growth = sol.objective_value
        flux = sol['PGI']
    
    Args:
        problem (LPProblem or MetabolicModel or cobra.Model):
            The LP problem. Model descriptors are built into an LPProblem first.
            
        solver (optional (str)):
            The solver that should be used for FBA.
            
        constraints (optional (str) or (list of str) or (list of [dict,str,float])): (Default: '')
            List of *linear* constraints to be applied on top of the model: signs + or -, scalar 
            factors for reaction rates, inclusive (in)equalities and a float value on the right hand 
            side. Correct (and identical) inputs are, for instance: 
            constraints='-EX_o2_e <= 5, ATPM = 20' or
            constraints=['-EX_o2_e <= 5', 'ATPM = 20'] or
            constraints=[[{'EX_o2_e':-1},'<=',5], [{'ATPM':1},'=',20]]
            
        obj (optional (str) or (dict)):
            A custom linear objective function, e.g. obj='BIOMASS' or obj={'BIOMASS': 1}.
            
        obj_sense (optional (str)): (Default: 'maximize')
            The optimization direction: 'maximize' (or 'max') or 'minimize' (or 'min').
            
        tlim (optional (float)):
            Time limit in seconds.
            
    Returns:
        (cobra.core.Solution):
            A solution object that contains the objective value, the optimal flux vector
            (Solution.fluxes) and the optimization status.
            
    Raises:
        InfeasibleError, UnboundedError, BackendError:
            If the solver does not return an optimal solution.
    """
    model = problem
    problem = _as_problem(problem)
    solver = select_solver(solver, model)
    reaction_ids = list(problem.reaction_ids)
    A_ineq, b_ineq, A_eq, b_eq = _extra_constraints(kwargs.get(CONSTRAINTS), reaction_ids)

    patch = None
    if kwargs.get(OBJECTIVE) is not None:
        obj = kwargs[OBJECTIVE]
        if type(obj) is str:
            obj = linexpr2dict(obj, reaction_ids)
        patch = LPPatch(objective=[[problem.index(k), v] for k, v in obj.items()])

    obj_sense = kwargs.get(OBJ_SENSE, MAXIMIZE)
    if obj_sense in ['max', MAXIMIZE]:
        maximize = True
    elif obj_sense in ['min', MINIMIZE]:
        maximize = False
    else:
        raise ValueError("obj_sense must be 'maximize' or 'minimize', not '" + str(obj_sense) + "'.")

    lp = _build_lp(problem, patch, A_ineq, b_ineq, A_eq, b_eq, solver, kwargs.get(T_LIMIT))
    if not maximize:
        lp.set_objective([-v for v in lp.c])
    x, min_cx, status = lp.solve()
    raise_for_status(status, 'FBA')
    fluxes = Series(x, index=reaction_ids, name='fluxes', dtype=float)
    return Solution(objective_value=-min_cx if maximize else min_cx, status=status, fluxes=fluxes)


def fva(problem, solver=None, reactions=None, processes=None, **kwargs) -> DataFrame:
    """Flux Variability Analysis (FVA)
    
    Flux Variability Analysis determines the flux ranges of reactions by minimizing and 
    maximizing the flux through each reaction of a given metabolic network under the
    same steady-state and bound constraints. Every reaction is handled independently;
    its two LPs are solved on a worker that owns a private copy of the LP, in which only
    the objective is replaced. The shared problem is never modified.
    
    The first reaction whose LP fails aborts the whole analysis: the corresponding
    SolverError is raised and no partial result is returned. Fluxes are reported as
    returned by the solver, i.e. values close to zero are not rounded.
    
    Example:
        flux_ranges = fva(problem, solver='glpk', reactions=['PGI', 'PFK'], processes=4)
    
    Args:
        problem (LPProblem or MetabolicModel or cobra.Model):
            The LP problem. Model descriptors are built into an LPProblem first.
            
        solver (optional (str)):
            The solver that should be used for FVA.
            
        reactions (optional (list of str)): (Default: all reactions)
            Identifiers of the reactions whose flux ranges are computed.
            
        processes (optional (int)): (Default: cobra Configuration().processes)
            Number of worker processes. With 1, all LPs are solved in the calling process.
            
        constraints (optional (str) or (list of str) or (list of [dict,str,float])): (Default: '')
            List of *linear* constraints to be applied on top of the model (see fba).
            
        fraction_of_optimum (optional (float)):
            If given, the model objective is first optimized with FBA and the objective is
            constrained to at least this fraction of its optimum in all FVA LPs.
            
        tlim (optional (float)):
            Time limit in seconds for every single LP.
            
    Returns:
        (pandas.DataFrame):
            A data frame indexed by reaction identifiers, containing the minimum and maximum
            attainable flux rates of the requested reactions.
            
    Raises:
        InfeasibleError, UnboundedError, BackendError:
            If one of the LPs does not return an optimal solution.
    """
    model = problem
    problem = _as_problem(problem)
    solver = select_solver(solver, model)
    reaction_ids = list(problem.reaction_ids)
    if reactions is None:
        targets = reaction_ids
    else:
        if type(reactions) is str:
            reactions = [reactions]
        targets = list(dict.fromkeys(reactions))
    cols = [problem.index(r) for r in targets]
    if not cols:
        return DataFrame({MINIMUM: [], MAXIMUM: []}, index=[], dtype=float)

    A_ineq, b_ineq, A_eq, b_eq = _extra_constraints(kwargs.get(CONSTRAINTS), reaction_ids)
    tlim = kwargs.get(T_LIMIT)

    fraction = kwargs.get(FRACTION_OF_OPTIMUM)
    if fraction is not None:
        if not 0.0 <= fraction <= 1.0:
            raise ValueError('fraction_of_optimum must be between 0 and 1.')
        opt = fba(problem, solver=solver, constraints=kwargs.get(CONSTRAINTS), tlim=tlim).objective_value
        min_obj = opt - (1.0 - fraction) * abs(opt)
        # c*v >= min_obj
        A_ineq = sparse.vstack((A_ineq, sparse.csr_matrix([-v for v in problem.c])), 'csr')
        b_ineq = b_ineq + [-min_obj]
        logging.info('Objective constrained to at least ' + str(min_obj) + ' during FVA.')

    if processes is None:
        processes = Configuration().processes
    processes = max(1, min(int(processes), len(cols)))
    logging.info('Running FVA for ' + str(len(cols)) + ' reactions with ' + str(processes) + ' process(es) using ' +
                 solver + '.')

    ranges = {}
    if processes > 1:
        if solver != GLPK:
            initializer = fva_worker_init
            initargs = (problem, A_ineq, b_ineq, A_eq, b_eq, solver, tlim)
            compute = fva_worker_compute
        # GLPK works better when reinitializing the LP in every iteration. Unfortunately, this is slow
        # but for now by far the most stable solution.
        else:
            initializer = fva_worker_init_glpk
            initargs = (problem, A_ineq, b_ineq, A_eq, b_eq, tlim)
            compute = fva_worker_compute_glpk
        with ProcessPool(processes, initializer=initializer, initargs=initargs) as pool:
            chunk_size = len(cols) // processes
            try:
                for col, value in pool.imap_unordered(compute, cols, chunksize=chunk_size):
                    ranges[col] = value
            except SolverError:
                # stop the remaining tasks, no partial result is returned
                pool.terminate()
                raise
    else:
        lp = _build_lp(problem, LPPatch(objective=[]), A_ineq, b_ineq, A_eq, b_eq, solver, tlim)
        prev = None
        for col in cols:
            ranges[col] = flux_range(lp, col, prev, problem.reaction_ids[col])
            prev = col

    return DataFrame(
        {
            MINIMUM: [ranges[c][0] for c in cols],
            MAXIMUM: [ranges[c][1] for c in cols],
        },
        index=targets,
    )
