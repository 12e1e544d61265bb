import threading
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import numpy as np
from scipy.stats import entropy
from herbdash.domain.models.features import FeatureSpec, FULL_CHEM_SPEC
from herbdash.domain.repositories.reference_repository import ReferenceRepository
from herbdash.config.settings import Settings, get_settings
from herbdash.config.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class WeightVector:
    """Fused importance weights for the full-chem panel, aligned with ``keys``."""
    keys: Tuple[str, ...]
    critic: Tuple[float, ...]
    entropy: Tuple[float, ...]
    fused: Tuple[float, ...]

    def as_array(self) -> np.ndarray:
        return np.array(self.fused, dtype=float)

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(self.keys, self.fused))


def directional_minmax(X: np.ndarray, spec: FeatureSpec, epsilon: float) -> np.ndarray:
    """
    Min-max normalize each column of X into [0, 1], flipping lower-is-better
    columns. Zero ranges are floored to ``epsilon``.
    """
    col_min = X.min(axis=0)
    col_max = X.max(axis=0)
    col_range = col_max - col_min
    col_range = np.where(col_range == 0, epsilon, col_range)
    better = np.array([f.higher_is_better is not False for f in spec.features])
    return np.where(better, (X - col_min) / col_range, (col_max - X) / col_range)


def _normalize(values: np.ndarray) -> np.ndarray:
    values = np.clip(values, 0.0, None)
    total = values.sum()
    if total <= 0 or not np.isfinite(total):
        return np.full(values.shape, 1.0 / len(values))
    return values / total


def critic_weights(Z: np.ndarray) -> np.ndarray:
    """CRITIC: contrast intensity (sample std) times conflict (sum of 1 - r)."""
    sigma = Z.std(axis=0, ddof=1) if Z.shape[0] > 1 else np.zeros(Z.shape[1])
    with np.errstate(invalid="ignore", divide="ignore"):
        corr = np.corrcoef(Z, rowvar=False)
    # Constant columns have no defined correlation; treat them as uncorrelated
    corr = np.nan_to_num(np.atleast_2d(corr), nan=0.0)
    conflict = (1.0 - corr).sum(axis=1)
    return _normalize(sigma * conflict)


def entropy_weights(Z: np.ndarray, shift: float) -> np.ndarray:
    """Entropy weight method: redundancy 1 - E_j of each shifted, renormalized column."""
    n = Z.shape[0]
    if n < 2:
        return np.full(Z.shape[1], 1.0 / Z.shape[1])
    P = Z + shift
    P = P / P.sum(axis=0)
    E = entropy(P, axis=0) / np.log(n)
    return _normalize(1.0 - E)


class WeightService:
    """
    Derives the fused CRITIC + entropy weight vector for the full-chem panel
    from the training split. Computed once per service instance.
    """
    def __init__(self, reference_repo: ReferenceRepository, settings: Optional[Settings] = None):
        self.reference_repo = reference_repo
        self.settings = settings or get_settings()
        self._weights: Optional[WeightVector] = None
        self._lock = threading.Lock()

    def get_weights(self) -> WeightVector:
        if self._weights is not None:
            return self._weights
        with self._lock:
            if self._weights is None:
                self._weights = self._compute()
        return self._weights

    def _compute(self, spec: FeatureSpec = FULL_CHEM_SPEC) -> WeightVector:
        reference = self.reference_repo.load()
        X, _ = reference.design_matrix(reference.training, spec)
        Z = directional_minmax(X, spec, self.settings.epsilon)

        w_critic = critic_weights(Z)
        w_entropy = entropy_weights(Z, self.settings.entropy_shift)
        alpha = self.settings.fusion_alpha
        fused = _normalize(alpha * w_critic + (1.0 - alpha) * w_entropy)

        weights = WeightVector(
            keys=tuple(spec.keys),
            critic=tuple(float(w) for w in w_critic),
            entropy=tuple(float(w) for w in w_entropy),
            fused=tuple(float(w) for w in fused),
        )
        logger.info(f"Fused feature weights computed: "
                    f"{ {k: round(v, 4) for k, v in weights.as_dict().items()} }")
        return weights
