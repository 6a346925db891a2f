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
"""Translation of metabolic models into LP problems (LPProblem, LPPatch, build)"""

from numpy import isnan
from scipy import sparse
from typing import Dict, List, Tuple
from fluxspan.errors import ConstructionError
from fluxspan.model import MetabolicModel
import logging


class LPPatch(object):
    """Index-addressed override of an LPProblem's objective and bounds
    
    A patch never modifies the problem it is applied to. It is used to derive
    single-reaction objectives or transient bound changes from a shared base problem.
    
    Example:
        patch = LPPatch(objective=[[3, 1.0]], bounds={5: (0.0, 0.0)})
    
    Args:
        objective (optional (list of [int, float])):
            Index-value pairs of objective coefficients. If given, all coefficients not
            listed are zero.
            
        bounds (optional (dict)):
            Variable indices mapped to (lower bound, upper bound) tuples.
    """

    def __init__(self, objective=None, bounds=None):
        self.objective = [[int(i), float(v)] for i, v in objective] if objective is not None else None
        self.bounds = {int(i): (float(l), float(u)) for i, (l, u) in bounds.items()} if bounds else {}


class LPProblem(object):
    """Flux balance LP of a metabolic network
    
    Holds one continuous variable per reaction and one steady-state equality
    constraint per species:
    
        maximize c * v
        subject to: A_eq * v = 0
                    lb <= v <= ub
    
    All vectors and the stoichiometric matrix are read-only. Solving a problem
    never modifies it, so one instance can be shared by any number of FBA and FVA
    runs, including FVA workers in other processes.
    
    Instances are created with build().
    
    Args:
        reaction_ids (list of str):
            Reaction identifiers in column order.
            
        species_ids (list of str):
            Species identifiers in row order.
            
        A_eq (sparse.csr_matrix):
            Stoichiometric matrix (species x reactions).
            
        lb, ub (list of float):
            Variable bounds.
            
        c (list of float):
            Objective coefficients (sense: maximization).
    """

    def __init__(self, reaction_ids, species_ids, A_eq, lb, ub, c):
        self.reaction_ids = tuple(reaction_ids)
        self.species_ids = tuple(species_ids)
        self.A_eq = sparse.csr_matrix(A_eq, dtype=float)
        self.b_eq = tuple([0.0] * len(self.species_ids))
        self.lb = tuple(float(l) for l in lb)
        self.ub = tuple(float(u) for u in ub)
        self.c = tuple(float(v) for v in c)
        self._index = {r: i for i, r in enumerate(self.reaction_ids)}

    @property
    def num_reactions(self) -> int:
        return len(self.reaction_ids)

    @property
    def num_species(self) -> int:
        return len(self.species_ids)

    def index(self, reaction_id) -> int:
        """Column index of a reaction"""
        try:
            return self._index[reaction_id]
        except KeyError:
            raise ValueError("Reaction " + str(reaction_id) + " is not part of the problem.")

    def objective_dict(self) -> Dict[str, float]:
        """Non-zero objective coefficients keyed by reaction identifier"""
        return {r: v for r, v in zip(self.reaction_ids, self.c) if v != 0.0}

    def patched(self, patch) -> Tuple[List, List, List]:
        """Effective objective and bound vectors after applying a patch
        
        Returns copies; the problem itself stays untouched.
        
        Args:
            patch (LPPatch):
                The override to apply.
        
        Returns:
            (Tuple[List, List, List]):
            c, lb, ub
        """
        c = list(self.c)
        lb = list(self.lb)
        ub = list(self.ub)
        if patch is None:
            return c, lb, ub
        if patch.objective is not None:
            c = [0.0] * self.num_reactions
            for i, v in patch.objective:
                c[i] = v
        for i, (l, u) in patch.bounds.items():
            lb[i] = l
            ub[i] = u
        return c, lb, ub

    def __repr__(self):
        return "<LPProblem with " + str(self.num_species) + " constraints and " + str(self.num_reactions) + " variables>"


def build(model, skip_checks=False) -> LPProblem:
    """Build the flux balance LP of a metabolic model
    
    Every species becomes one equality constraint (the sum of stoichiometric coefficient
    times flux over all reactions that reference the species equals zero), every reaction
    becomes one variable bounded by its flux bounds and the objective is the sum of
    objective coefficient times flux.
    
    Malformed models are rejected before any LP is created: reactions that reference
    species which are not part of the model, reactions with a lower bound greater
    than their upper bound, duplicate identifiers and NaN values raise a
    ConstructionError. Nothing is clamped or corrected.
    
    Example:
        problem = build(model)
    
    Args:
        model (MetabolicModel or cobra.Model):
            The metabolic model. cobra models are converted with MetabolicModel.from_cobra.
            
        skip_checks (optional (bool)): (Default: False)
            Skip the checks for duplicate identifiers and NaN values. References to
            unknown species and inverted bounds are always checked.
            
    Returns:
        (LPProblem):
            The LP problem.
    """
    if not isinstance(model, MetabolicModel):
        if hasattr(model, 'metabolites') and hasattr(model, 'reactions'):
            model = MetabolicModel.from_cobra(model)
        else:
            raise ConstructionError("Expected a MetabolicModel or a cobra.Model, got " + type(model).__name__ + ".")
    species_ids = model.species_ids
    reaction_ids = model.reaction_ids
    if not skip_checks:
        for kind, ids in (('species', species_ids), ('reaction', reaction_ids)):
            if len(set(ids)) != len(ids):
                dupl = sorted(set(i for i in ids if ids.count(i) > 1))
                raise ConstructionError("Duplicate " + kind + " identifier(s): " + ", ".join(dupl) + ".")
    species_idx = {s: i for i, s in enumerate(species_ids)}

    rows = []
    cols = []
    data = []
    for j, reac in enumerate(model.reactions):
        lb, ub = reac.bounds
        if not skip_checks and (isnan(lb) or isnan(ub) or isnan(reac.objective_coefficient)):
            raise ConstructionError("Reaction " + reac.id + " has a NaN bound or objective coefficient.")
        if lb > ub:
            raise ConstructionError("Reaction " + reac.id + " has a lower bound (" + str(lb) +
                                    ") greater than its upper bound (" + str(ub) + ").")
        for sid, coeff in reac.stoichiometry.items():
            if sid not in species_idx:
                raise ConstructionError("Reaction " + reac.id + " references species " + sid +
                                        ", which is not part of the model.")
            if not skip_checks and isnan(coeff):
                raise ConstructionError("Reaction " + reac.id + " has a NaN coefficient for species " + sid + ".")
            rows += [species_idx[sid]]
            cols += [j]
            data += [coeff]
    A_eq = sparse.csr_matrix((data, (rows, cols)), shape=(len(species_ids), len(reaction_ids)))
    problem = LPProblem(reaction_ids,
                        species_ids,
                        A_eq,
                        [r.lower_bound for r in model.reactions],
                        [r.upper_bound for r in model.reactions],
                        [r.objective_coefficient for r in model.reactions])
    logging.info('Built LP problem with ' + str(problem.num_species) + ' constraints and ' + str(problem.num_reactions) +
                 ' variables from model ' + str(model.id) + '.')
    return problem
