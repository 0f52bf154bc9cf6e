import json
import logging
import os
import random
import threading
from typing import Dict, Iterable, List, Optional

from spectrum.models import Prompt

logger = logging.getLogger(__name__)

DEFAULT_PROMPTS_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), 'data', 'prompts.json')

FALLBACK_PROMPTS = [
    Prompt(
        id='height',
        category='physical',
        text='Rank players by height (tallest to shortest)',
        description='Order players from tallest to shortest based on their physical height',
    ),
    Prompt(
        id='fame_likelihood',
        category='future',
        text='Rank players by how likely they are to become famous',
        description='Who is most likely to achieve fame or celebrity status?',
    ),
]


class PromptCatalog:
    """An immutable snapshot of prompts grouped by category."""

    def __init__(self, prompts: Iterable[Prompt], categories: Optional[Dict[str, dict]] = None):
        self._prompts = tuple(prompts)
        self._categories = dict(categories or {})
        self._by_id = {p.id: p for p in self._prompts}

    @classmethod
    def from_data(cls, data: dict) -> 'PromptCatalog':
        """Build a catalog from ``{"prompts": [...], "categories": {...}}``.

        Entries without an id, text or category are dropped.
        """
        prompts = []
        seen = set()
        for entry in data.get('prompts') or []:
            if not isinstance(entry, dict) or not (entry.get('id') and entry.get('text') and entry.get('category')):
                logger.warning(f"[prompts-invalid] dropped entry={entry!r}")
                continue
            if str(entry['id']) in seen:
                logger.warning(f"[prompts-duplicate] dropped id={entry['id']}")
                continue
            seen.add(str(entry['id']))
            prompts.append(Prompt(
                id=str(entry['id']),
                category=str(entry['category']),
                text=str(entry['text']),
                description=str(entry.get('description') or ''),
            ))
        categories = data.get('categories') or {}
        if not isinstance(categories, dict):
            raise ValueError('categories must be an object')
        return cls(prompts, categories)

    @classmethod
    def from_file(cls, path: str) -> 'PromptCatalog':
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError('prompt data must be an object')
        return cls.from_data(data)

    @classmethod
    def fallback(cls) -> 'PromptCatalog':
        return cls(FALLBACK_PROMPTS, {p.category: {'name': p.category.title()} for p in FALLBACK_PROMPTS})

    def __len__(self):
        return len(self._prompts)

    @property
    def all_prompts(self) -> List[Prompt]:
        return list(self._prompts)

    @property
    def categories(self) -> Dict[str, dict]:
        return dict(self._categories)

    def category_names(self) -> List[str]:
        """Registered categories followed by any only seen on prompts."""
        names = list(self._categories)
        for p in self._prompts:
            if p.category not in names:
                names.append(p.category)
        return names

    def prompts_by_category(self, category: str) -> List[Prompt]:
        return [p for p in self._prompts if p.category == category]

    def get_prompt(self, prompt_id: str) -> Optional[Prompt]:
        return self._by_id.get(prompt_id)

    def random_prompts(self, count: int, exclude_ids=(), rng=None) -> List[Prompt]:
        rng = rng or random
        excluded = set(exclude_ids)
        available = [p for p in self._prompts if p.id not in excluded]
        return rng.sample(available, min(max(count, 0), len(available)))

    def stats(self) -> dict:
        return {
            'total_prompts': len(self._prompts),
            'total_categories': len(self.category_names()),
            'prompts_by_category': {c: len(self.prompts_by_category(c)) for c in self.category_names()},
        }


class PromptStore:
    """Holds the live catalog loaded from a JSON source.

    A failed initial load installs the built-in fallback catalog; a failed
    reload keeps whatever catalog was already live.
    """

    def __init__(self, source_path: Optional[str] = None):
        self.source_path = source_path or DEFAULT_PROMPTS_PATH
        self._lock = threading.Lock()
        self._catalog = PromptCatalog.fallback()
        self.load()

    def _read_source(self) -> PromptCatalog:
        catalog = PromptCatalog.from_file(self.source_path)
        if not len(catalog):
            raise ValueError(f'no valid prompts in {self.source_path}')
        return catalog

    def load(self) -> bool:
        try:
            catalog = self._read_source()
        except (OSError, ValueError, TypeError, AttributeError):
            logger.exception(f"[prompts-load-failed] source={self.source_path} using fallback prompts")
            with self._lock:
                self._catalog = PromptCatalog.fallback()
            return False
        with self._lock:
            self._catalog = catalog
        logger.info(f"[prompts-load] source={self.source_path} prompts={len(catalog)}")
        return True

    def reload(self) -> bool:
        try:
            catalog = self._read_source()
        except (OSError, ValueError, TypeError, AttributeError):
            logger.exception(f"[prompts-reload-failed] source={self.source_path} keeping previous catalog")
            return False
        with self._lock:
            self._catalog = catalog
        logger.info(f"[prompts-reload] source={self.source_path} prompts={len(catalog)}")
        return True

    def get_catalog(self) -> PromptCatalog:
        with self._lock:
            return self._catalog

    def stats(self) -> dict:
        data = self.get_catalog().stats()
        data['data_source'] = self.source_path
        return data


def _least_used(usage: Dict[str, int]) -> List[str]:
    lowest = min(usage.values())
    return [c for c, n in usage.items() if n == lowest]


def select_for_game(catalog: PromptCatalog, round_count: int, rng=None) -> List[Prompt]:
    """Pick one prompt per round, spreading picks evenly over categories.

    No prompt repeats until every prompt has been used once; past that point
    prompts are drawn from the whole catalog at random.
    """
    if round_count <= 0:
        return []
    rng = rng or random
    prompts = catalog.all_prompts
    if not prompts:
        return []
    if round_count > len(prompts):
        logger.warning(f"[prompts-repeat] requested={round_count} available={len(prompts)} some prompts will repeat")

    # Categories without prompts are left out; a zero count that can never
    # grow would keep every later pick on the unbalanced fallback.
    usage = {c: 0 for c in catalog.category_names() if catalog.prompts_by_category(c)}
    used = set()
    selected = []
    for _ in range(round_count):
        if len(used) < len(prompts):
            preferred = set(_least_used(usage))
            candidates = [p for p in prompts if p.category in preferred and p.id not in used]
            if not candidates:
                candidates = [p for p in prompts if p.id not in used]
            prompt = rng.choice(candidates)
        else:
            prompt = rng.choice(prompts)
        selected.append(prompt)
        used.add(prompt.id)
        usage[prompt.category] = usage.get(prompt.category, 0) + 1
    return selected
