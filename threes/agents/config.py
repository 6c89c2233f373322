# -*- coding: utf-8 -*-
"""
Agent properties, given as a whitespace-separated ``key=value`` string.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields


def parse_properties(text: str) -> dict[str, str]:
    """
    Split a property string into a dictionary.

    Parameters
    ----------
    text : str
        Pairs such as ``"name=learner alpha=0.1 save=weights.bin"``; later keys override earlier ones.

    Returns
    -------
    dict[str, str]
        The raw values by key.
    """
    properties = {}
    for pair in text.split():
        key, _, value = pair.partition('=')
        properties[key] = value
    return properties


def _to_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in ('1', 'true', 'yes', 'on'):
        return True
    if lowered in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(f'not a boolean: {value!r}')


_CONVERTERS = {
    'seed': int,
    'alpha': float,
    'depth': int,
    'context': _to_bool,
    'normalize': _to_bool,
    'init': float,
}


@dataclass
class AgentConfiguration:
    """
    Agent configuration.

    Attributes
    ----------
    name, role : str
        Labels of the agent.
    seed : int | None
        Seed of the agent's random generator.
    alpha : float
        Learning rate.
    depth : int
        Search depth, in plies.
    context : bool
        Whether the value function is split by last move and hint.
    normalize : bool
        Whether the learning rate is divided by the number of patterns.
    init : float
        Initial value of every weight.
    load, save : str | None
        Weight file read at construction and written on close.
    entropy : str
        Source of bonus-tile draws for the environment, ``'seeded'`` or ``'system'``.
    extra : dict[str, str]
        Properties with no dedicated field.
    """

    name: str = 'unknown'
    role: str = 'unknown'
    seed: int | None = None
    alpha: float = 0.1
    depth: int = 0
    context: bool = True
    normalize: bool = False
    init: float = 0.0
    load: str | None = None
    save: str | None = None
    entropy: str = 'seeded'
    extra: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_properties(cls, text: str = '', defaults: str = '') -> AgentConfiguration:
        """
        Build a configuration from a property string.

        Parameters
        ----------
        text : str, optional
            User properties.
        defaults : str, optional
            Properties applied first, overridden by ``text``.

        Raises
        ------
        ValueError
            If a numeric or boolean property cannot be converted.
        """
        properties = parse_properties(f'{defaults} {text}')
        names = {item.name for item in fields(cls)} - {'extra'}

        values, extra = {}, {}
        for key, value in properties.items():
            if key not in names:
                extra[key] = value
                continue
            try:
                values[key] = _CONVERTERS.get(key, str)(value)
            except ValueError as error:
                raise ValueError(f'invalid value for {key!r}: {value!r}') from error
        return cls(**values, extra=extra)
