"""
Utilities module for the simulator.

Provides common utility functions and helpers, including console printing
with rich formatting, the singleton pattern, and the random helpers every
stochastic operation in the simulator goes through.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from typing import Any, Generic, TypeVar

from catchery import log_warning
from rich.console import Console
from rich.rule import Rule

# Initialize the rich console.
_console = Console(markup=True, width=120, force_terminal=True, force_jupyter=False)


def cprint(*args: Any, **kwargs: Any) -> None:
    """
    Custom print function to handle colored output.

    Args:
        *args: Arguments to pass to the console print function.
        **kwargs: Keyword arguments to pass to the console print function.

    """
    _console.print(*args, **kwargs)


def crule(*args: Any, **kwargs: Any) -> None:
    """
    Custom print function to handle colored output with a rule.

    Args:
        *args: Arguments to pass to the Rule constructor.
        **kwargs: Keyword arguments to pass to the Rule constructor.

    """
    _console.print(Rule(*args, **kwargs))


# ---- Singleton Metaclass ----


_T = TypeVar("_T")


class Singleton(type, Generic[_T]):
    """
    Metaclass that returns the same instance every time.

    Constructor arguments are only used by the first call. Later calls that
    pass arguments get the existing instance and a warning; call `reset()`
    first to build a new instance from different arguments.
    """

    _instances: dict[Singleton[_T], _T] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> _T:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        elif args or kwargs:
            log_warning(
                f"{cls.__name__} is already built, ignoring the new arguments",
                {"args": [str(a) for a in args], "kwargs": sorted(kwargs)},
            )
        return cls._instances[cls]

    def reset(cls) -> None:
        """Forgets the cached instance, so the next call builds a new one."""
        cls._instances.pop(cls, None)


# ---- Randomness ----

# Shared generator used whenever an operation is not given one.
_default_rng = random.Random()


def seed(value: int | None) -> None:
    """Reseeds the shared generator."""
    _default_rng.seed(value)


def get_rng(rng: random.Random | None = None) -> random.Random:
    """
    Returns the given generator, or the shared one when None.

    Args:
        rng (random.Random | None): An injected generator, used by tests and
            replays to make outcomes deterministic.

    Returns:
        random.Random: The generator to draw from.

    """
    return _default_rng if rng is None else rng


def roll_chance(chance: float, rng: random.Random | None = None) -> bool:
    """
    Performs one Bernoulli trial.

    Args:
        chance (float): The probability of success, in [0, 1].
        rng (random.Random | None): Optional generator.

    Returns:
        bool: True with probability `chance`.

    """
    return get_rng(rng).random() < chance


def uniform_int(low: int, high: int, rng: random.Random | None = None) -> int:
    """Returns an integer uniformly drawn from [low, high], both inclusive."""
    if high < low:
        raise ValueError(f"Empty range [{low}, {high}]")
    return get_rng(rng).randint(low, high)


def pick_by_roll(options: Sequence[tuple[_T, float]], roll: float) -> _T:
    """
    Maps a roll in [0, total weight) onto a weighted option.

    The roll walks the options in order, subtracting each weight until it
    drops below zero, which reproduces a cumulative threshold table. A roll
    outside the valid range falls back to the last option.

    Args:
        options (Sequence[tuple[_T, float]]): The (option, weight) pairs.
        roll (float): The roll to map.

    Returns:
        _T: The selected option.

    """
    if not options:
        raise ValueError("Cannot pick from an empty option list.")
    total = sum(weight for _, weight in options)
    if not 0 <= roll < total:
        return options[-1][0]
    for option, weight in options:
        roll -= weight
        if roll < 0:
            return option
    return options[-1][0]


def weighted_choice(
    options: Iterable[tuple[_T, float]],
    rng: random.Random | None = None,
) -> _T:
    """
    Selects one option with probability proportional to its weight.

    Options with a non-positive weight can never be selected.

    Args:
        options (Iterable[tuple[_T, float]]): The (option, weight) pairs.
        rng (random.Random | None): Optional generator.

    Returns:
        _T: The selected option.

    Raises:
        ValueError: If no option has a positive weight.

    """
    pairs = [(option, weight) for option, weight in options if weight > 0]
    if not pairs:
        raise ValueError("Cannot pick from options with no positive weight.")
    total = sum(weight for _, weight in pairs)
    return pick_by_roll(pairs, get_rng(rng).random() * total)


def uniform_choice(options: Sequence[_T], rng: random.Random | None = None) -> _T:
    """Selects one element of a non-empty sequence uniformly."""
    if not options:
        raise ValueError("Cannot pick from an empty sequence.")
    return get_rng(rng).choice(options)


# ---- Display ----


def make_bar(current: int, maximum: int, length: int = 10, color: str = "white") -> str:
    """
    Creates a visual progress bar representation.

    Args:
        current (int): The current value.
        maximum (int): The maximum value.
        length (int): The length of the bar in characters. Defaults to 10.
        color (str): The color for the filled portion. Defaults to "white".

    Returns:
        str: A formatted progress bar string.

    """
    filled = int((current / maximum) * length) if maximum > 0 else 0
    empty = length - filled
    bar = f"[{color}]" + "▮" * filled
    if empty > 0:
        bar += "[dim white]" + "▯" * empty + "[/]"
    bar += "[/]"
    return bar
