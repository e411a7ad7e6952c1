"""Technique tables for Grapple.

Techniques are keyed by (position, role, category). The same technique id
can appear in several positions with a different transition; each entry is
its own record.

Scoring points follow IBJJF values: takedown 2, sweep 2, guard pass 3,
mount 4, back take 4.
"""

from __future__ import annotations

from typing import Iterable, Optional

from grapple.models.catalog import (
    CATEGORY_ORDER,
    Category,
    CatalogIntegrityError,
    PositionId,
    Risk,
    Role,
    Technique,
    TokenType,
    Transition,
)
from grapple.models.positions import POSITIONS

A = Category.ATTACK
C = Category.CONTROL
D = Category.DEFENSE
R = Category.REVERSAL

P = PositionId
T = TokenType


def _tech(
    technique_id: str,
    name: str,
    category: Category,
    modifier: int = 0,
    *,
    submission: bool = False,
    to: Optional[PositionId] = None,
    top: bool = False,
    points: int = 0,
    reward: Optional[TokenType] = None,
    remove: Optional[TokenType] = None,
    risk: Risk = Risk.NEUTRAL,
    requires: Iterable[TokenType] = (),
) -> Technique:
    """Build a technique record with compact keyword names."""
    return Technique(
        id=technique_id,
        name=name,
        category=category,
        modifier=modifier,
        is_submission=submission,
        transition=Transition(position=to, user_becomes_top=top) if to is not None else None,
        scoring_points=points,
        token_reward=reward,
        token_remove=remove,
        risk=risk,
        required_tokens=tuple(requires),
    )


# Standing is symmetric: both roles get the same options.
_STANDING: dict[Category, list[Technique]] = {
    A: [
        _tech("takedown", "Takedown", A, 1, to=P.HALF_GUARD, top=True, points=2),
        _tech("guard_pull", "Guard Pull", A, 2, to=P.CLOSED_GUARD, top=False, risk=Risk.SAFE),
        _tech("guillotine", "Standing Guillotine", A, 1, submission=True,
              risk=Risk.RISKY, requires=[T.INSIDE_POSITION]),
    ],
    C: [
        _tech("collar_tie", "Collar Tie", C, 1, reward=T.INSIDE_POSITION, risk=Risk.SAFE),
        _tech("body_lock", "Body Lock", C, 1, reward=T.BALANCE_COMPROMISED),
    ],
    D: [
        _tech("sprawl", "Sprawl", D, 1, to=P.FRONT_HEADLOCK, top=True,
              remove=T.BALANCE_COMPROMISED),
        _tech("hand_fighting", "Hand Fighting", D, 2, remove=T.INSIDE_POSITION, risk=Risk.SAFE),
    ],
}


TECHNIQUES: dict[PositionId, dict[Role, dict[Category, list[Technique]]]] = {
    P.STANDING_NEUTRAL: {
        Role.TOP: _STANDING,
        Role.BOTTOM: _STANDING,
    },
    P.CLOSED_GUARD: {
        Role.TOP: {
            A: [
                _tech("ezekiel_choke", "Ezekiel Choke", A, 0, submission=True,
                      risk=Risk.RISKY, requires=[T.INSIDE_POSITION]),
            ],
            C: [
                _tech("wrist_control", "Wrist Control", C, 1, reward=T.INSIDE_POSITION,
                      risk=Risk.SAFE),
            ],
            D: [
                _tech("posture_up", "Posture Up", D, 2, to=P.OPEN_GUARD, top=True,
                      remove=T.POSTURE_BROKEN, risk=Risk.SAFE),
            ],
        },
        Role.BOTTOM: {
            A: [
                _tech("armbar", "Armbar", A, 2, submission=True, risk=Risk.RISKY,
                      requires=[T.ARM_ISOLATED]),
                _tech("triangle", "Triangle Choke", A, 2, submission=True, risk=Risk.RISKY,
                      requires=[T.POSTURE_BROKEN]),
                _tech("cross_collar_choke", "Cross Collar Choke", A, 1, submission=True,
                      requires=[T.POSTURE_BROKEN, T.INSIDE_POSITION]),
                _tech("kimura", "Kimura", A, 1, submission=True, requires=[T.ARM_ISOLATED]),
            ],
            C: [
                _tech("posture_break", "Posture Break", C, 1, reward=T.POSTURE_BROKEN,
                      risk=Risk.SAFE),
                _tech("wrist_control", "Wrist Control", C, 1, reward=T.ARM_ISOLATED,
                      risk=Risk.SAFE),
            ],
            D: [
                _tech("hand_fighting", "Hand Fighting", D, 2, remove=T.INSIDE_POSITION,
                      risk=Risk.SAFE),
            ],
            R: [
                _tech("scissor_sweep", "Scissor Sweep", R, 1, to=P.MOUNT, top=True, points=2),
                _tech("hip_bump_sweep", "Hip Bump Sweep", R, 2, to=P.MOUNT, top=True, points=2,
                      risk=Risk.RISKY),
            ],
        },
    },
    P.OPEN_GUARD: {
        Role.TOP: {
            A: [
                _tech("knee_cut_pass", "Knee Cut Pass", A, 1, to=P.SIDE_CONTROL, top=True,
                      points=3),
                _tech("torreando_pass", "Torreando Pass", A, 2, to=P.SIDE_CONTROL, top=True,
                      points=3, risk=Risk.RISKY),
                _tech("ankle_lock", "Straight Ankle Lock", A, 1, submission=True,
                      risk=Risk.RISKY, requires=[T.LEG_ISOLATED]),
            ],
            C: [
                _tech("leg_lace", "Leg Lace", C, 1, reward=T.LEG_ISOLATED),
            ],
            D: [
                _tech("hand_fighting", "Hand Fighting", D, 2, remove=T.INSIDE_POSITION,
                      risk=Risk.SAFE),
            ],
        },
        Role.BOTTOM: {
            A: [
                _tech("triangle", "Triangle Choke", A, 1, submission=True, risk=Risk.RISKY,
                      requires=[T.POSTURE_BROKEN]),
            ],
            C: [
                _tech("collar_tie", "Collar Sleeve Grips", C, 1, reward=T.INSIDE_POSITION,
                      risk=Risk.SAFE),
                _tech("wrist_control", "Wrist Control", C, 1, reward=T.ARM_ISOLATED,
                      risk=Risk.SAFE),
            ],
            D: [
                _tech("guard_recovery", "Guard Recovery", D, 2, to=P.CLOSED_GUARD, top=False,
                      risk=Risk.SAFE),
            ],
            R: [
                _tech("scissor_sweep", "Scissor Sweep", R, 1, to=P.MOUNT, top=True, points=2),
                _tech("technical_standup", "Technical Standup", R, 1, to=P.STANDING_NEUTRAL,
                      top=True, risk=Risk.SAFE),
            ],
        },
    },
    P.HALF_GUARD: {
        Role.TOP: {
            A: [
                _tech("knee_cut_pass", "Knee Cut Pass", A, 1, to=P.SIDE_CONTROL, top=True,
                      points=3),
                _tech("darce_choke", "D'Arce Choke", A, 1, submission=True, risk=Risk.RISKY,
                      requires=[T.INSIDE_POSITION]),
            ],
            C: [
                _tech("crossface", "Crossface", C, 1, reward=T.POSTURE_BROKEN, risk=Risk.SAFE),
                _tech("underhook_control", "Underhook", C, 1, reward=T.INSIDE_POSITION),
            ],
            D: [
                _tech("hand_fighting", "Hand Fighting", D, 2, remove=T.INSIDE_POSITION,
                      risk=Risk.SAFE),
            ],
        },
        Role.BOTTOM: {
            A: [
                _tech("kimura", "Kimura", A, 1, submission=True, risk=Risk.RISKY,
                      requires=[T.ARM_ISOLATED]),
            ],
            C: [
                _tech("underhook_control", "Underhook", C, 1, reward=T.INSIDE_POSITION),
                _tech("knee_shield_frame", "Knee Shield Frame", C, 1, to=P.KNEE_SHIELD,
                      top=False, risk=Risk.SAFE),
            ],
            D: [
                _tech("frame_and_shrimp", "Frame and Shrimp", D, 2, to=P.OPEN_GUARD, top=False,
                      risk=Risk.SAFE),
            ],
            R: [
                _tech("old_school_sweep", "Old School Sweep", R, 2, to=P.SIDE_CONTROL, top=True,
                      points=2, requires=[T.INSIDE_POSITION]),
            ],
        },
    },
    P.KNEE_SHIELD: {
        Role.TOP: {
            A: [
                _tech("knee_cut_pass", "Knee Cut Pass", A, 1, to=P.SIDE_CONTROL, top=True,
                      points=3, risk=Risk.RISKY),
            ],
            C: [
                _tech("head_control", "Head Control", C, 1, reward=T.POSTURE_BROKEN,
                      risk=Risk.SAFE),
            ],
            D: [
                _tech("hand_fighting", "Hand Fighting", D, 2, remove=T.ARM_ISOLATED,
                      risk=Risk.SAFE),
            ],
        },
        Role.BOTTOM: {
            C: [
                _tech("wrist_control", "Wrist Control", C, 1, reward=T.ARM_ISOLATED,
                      risk=Risk.SAFE),
            ],
            D: [
                _tech("knee_shield_recover", "Recover Closed Guard", D, 2, to=P.CLOSED_GUARD,
                      top=False, risk=Risk.SAFE),
            ],
            R: [
                _tech("hip_bump_sweep", "Hip Bump Sweep", R, 1, to=P.MOUNT, top=True, points=2,
                      risk=Risk.RISKY),
                _tech("technical_standup", "Technical Standup", R, 1, to=P.STANDING_NEUTRAL,
                      top=True, risk=Risk.SAFE),
            ],
        },
    },
    P.SIDE_CONTROL: {
        Role.TOP: {
            A: [
                _tech("mount_transition", "Mount Transition", A, 1, to=P.MOUNT, top=True,
                      points=4),
                _tech("americana", "Americana", A, 1, submission=True,
                      requires=[T.ARM_ISOLATED]),
                _tech("kimura", "Kimura", A, 1, submission=True, risk=Risk.RISKY,
                      requires=[T.ARM_ISOLATED]),
            ],
            C: [
                _tech("crossface", "Crossface", C, 1, reward=T.POSTURE_BROKEN, risk=Risk.SAFE),
                _tech("chest_pressure", "Chest Pressure", C, 2, reward=T.BALANCE_COMPROMISED,
                      risk=Risk.SAFE),
            ],
        },
        Role.BOTTOM: {
            C: [
                _tech("underhook_control", "Underhook", C, 1, reward=T.INSIDE_POSITION),
            ],
            D: [
                _tech("frame_and_shrimp", "Frame and Shrimp", D, 2, to=P.HALF_GUARD, top=False,
                      risk=Risk.SAFE),
                _tech("turtle_up", "Turtle Up", D, 1, to=P.TURTLE, top=False, risk=Risk.SAFE),
            ],
        },
    },
    P.MOUNT: {
        Role.TOP: {
            A: [
                _tech("cross_collar_choke", "Cross Collar Choke", A, 1, submission=True,
                      requires=[T.POSTURE_BROKEN]),
                _tech("armbar", "Armbar", A, 1, submission=True, risk=Risk.RISKY,
                      requires=[T.ARM_ISOLATED]),
                _tech("americana", "Americana", A, 1, submission=True,
                      requires=[T.ARM_ISOLATED]),
                _tech("ezekiel_choke", "Ezekiel Choke", A, 0, submission=True, risk=Risk.RISKY),
            ],
            C: [
                _tech("chest_pressure", "Chest Pressure", C, 1, reward=T.POSTURE_BROKEN,
                      risk=Risk.SAFE),
                _tech("wrist_control", "Wrist Control", C, 1, reward=T.ARM_ISOLATED,
                      risk=Risk.SAFE),
            ],
        },
        Role.BOTTOM: {
            D: [
                _tech("bridge", "Bridge", D, 1, remove=T.POSTURE_BROKEN, risk=Risk.SAFE),
                _tech("hand_fighting", "Hand Fighting", D, 2, remove=T.ARM_ISOLATED,
                      risk=Risk.SAFE),
            ],
            R: [
                _tech("trap_and_roll", "Trap and Roll", R, 1, to=P.CLOSED_GUARD, top=True,
                      points=2),
                _tech("elbow_escape", "Elbow Escape", R, 2, to=P.HALF_GUARD, top=False,
                      risk=Risk.SAFE),
            ],
        },
    },
    P.BACK_CONTROL: {
        Role.TOP: {
            A: [
                _tech("rear_naked_choke", "Rear Naked Choke", A, 2, submission=True,
                      requires=[T.BACK_EXPOSED]),
                _tech("cross_collar_choke", "Bow and Arrow Choke", A, 1, submission=True,
                      risk=Risk.RISKY, requires=[T.POSTURE_BROKEN]),
            ],
            C: [
                _tech("seatbelt_grip", "Seatbelt Grip", C, 1, reward=T.BACK_EXPOSED,
                      risk=Risk.SAFE),
                _tech("body_lock", "Body Triangle", C, 1, reward=T.BALANCE_COMPROMISED),
            ],
        },
        Role.BOTTOM: {
            D: [
                _tech("hand_fighting", "Hand Fighting", D, 2, remove=T.BACK_EXPOSED,
                      risk=Risk.SAFE),
            ],
            R: [
                _tech("back_escape", "Back Escape", R, 1, to=P.HALF_GUARD, top=True),
            ],
        },
    },
    P.TURTLE: {
        Role.TOP: {
            A: [
                _tech("back_take", "Back Take", A, 1, to=P.BACK_CONTROL, top=True, points=4),
            ],
            C: [
                _tech("seatbelt_grip", "Seatbelt Grip", C, 1, reward=T.BACK_EXPOSED,
                      risk=Risk.SAFE),
                _tech("head_control", "Head Control", C, 1, reward=T.POSTURE_BROKEN),
            ],
        },
        Role.BOTTOM: {
            D: [
                _tech("guard_recovery", "Guard Recovery", D, 2, to=P.OPEN_GUARD, top=False,
                      risk=Risk.SAFE),
            ],
            R: [
                _tech("granby_roll", "Granby Roll", R, 1, to=P.CLOSED_GUARD, top=False,
                      risk=Risk.RISKY),
                _tech("sit_out", "Sit Out", R, 1, to=P.STANDING_NEUTRAL, top=True),
            ],
        },
    },
    P.FRONT_HEADLOCK: {
        Role.TOP: {
            A: [
                _tech("guillotine", "Guillotine", A, 1, submission=True,
                      requires=[T.POSTURE_BROKEN]),
                _tech("darce_choke", "D'Arce Choke", A, 1, submission=True, risk=Risk.RISKY,
                      requires=[T.ARM_ISOLATED]),
                _tech("back_take", "Spin to Back", A, 1, to=P.BACK_CONTROL, top=True, points=4,
                      risk=Risk.RISKY),
            ],
            C: [
                _tech("head_control", "Head Control", C, 1, reward=T.POSTURE_BROKEN,
                      risk=Risk.SAFE),
                _tech("wrist_control", "Wrist Control", C, 1, reward=T.ARM_ISOLATED),
            ],
        },
        Role.BOTTOM: {
            D: [
                _tech("posture_up", "Posture Up", D, 2, remove=T.POSTURE_BROKEN, risk=Risk.SAFE),
                _tech("hand_fighting", "Hand Fighting", D, 2, remove=T.ARM_ISOLATED,
                      risk=Risk.SAFE),
            ],
            R: [
                _tech("headlock_escape", "Headlock Escape", R, 1, to=P.STANDING_NEUTRAL,
                      top=True, risk=Risk.SAFE),
            ],
        },
    },
}


# =============================================================================
# Lookups
# =============================================================================


def _role_table(position_id: PositionId, role: Role) -> dict[Category, list[Technique]]:
    try:
        return TECHNIQUES[PositionId(position_id)][Role(role)]
    except (KeyError, ValueError):
        raise CatalogIntegrityError(
            f"No techniques defined for {position_id!r} as {role!r}"
        ) from None


def get_available_categories(position_id: PositionId, role: Role) -> list[Category]:
    """Categories with at least one technique for this position and role.

    Returned in canonical order: attack, control, defense, reversal.
    """
    table = _role_table(position_id, role)
    return [cat for cat in CATEGORY_ORDER if table.get(cat)]


def get_techniques_for_position_role(
    position_id: PositionId,
    role: Role,
    category: Category,
) -> list[Technique]:
    """Techniques offered for (position, role, category); empty if none."""
    return list(_role_table(position_id, role).get(Category(category), []))


def can_use_technique(technique: Technique, tokens: Iterable[TokenType]) -> bool:
    """Check the holder has every token the technique requires."""
    held = set(tokens)
    return all(token in held for token in technique.required_tokens)


def validate_catalog() -> None:
    """Check the tables are internally consistent.

    Every position must offer at least one category to each role, and every
    transition must point at a known position.

    Raises:
        CatalogIntegrityError: On the first inconsistency found
    """
    for position_id in POSITIONS:
        for role in Role:
            if not get_available_categories(position_id, role):
                raise CatalogIntegrityError(
                    f"{position_id.value} offers no categories to {role.value}"
                )
            for category, techniques in _role_table(position_id, role).items():
                for technique in techniques:
                    if technique.category != category:
                        raise CatalogIntegrityError(
                            f"{technique.id} listed under {category.value} "
                            f"but declares {technique.category.value}"
                        )
                    if technique.transition and technique.transition.position not in POSITIONS:
                        raise CatalogIntegrityError(
                            f"{technique.id} transitions to unknown position "
                            f"{technique.transition.position!r}"
                        )


validate_catalog()
