"""
PoolState — Снимок состояния пула bonding curve

Immutable Pydantic модель: скалярные входы формул, переданные вызывающей
стороной (supply, reserve, reserve ratio, флаг graduated, конец buy-only окна).
Модель не хранит и не обновляет состояние: apply_buy / apply_sell
возвращают новый снимок.
"""

from pydantic import BaseModel, Field

from src.core.domain.units import PPM_DENOMINATOR
from src.core.math.checked_arithmetic import UINT256_MAX


class PoolState(BaseModel):
    """
    Состояние пула на момент расчёта.

    Immutable модель (frozen=True).
    """

    supply: int = Field(..., ge=0, le=UINT256_MAX, description="Supply токена (fixed-point 10^18)")
    reserve: int = Field(..., ge=0, le=UINT256_MAX, description="Резерв (десятичность резерва)")
    crr_ppm: int = Field(..., gt=0, le=PPM_DENOMINATOR, description="Reserve ratio в ppm")
    graduated: bool = Field(
        False, description="Пул окончательно перешёл из flat-фазы в bonding curve"
    )
    buy_only_until: int = Field(
        0, ge=0, le=UINT256_MAX, description="Unix-время окончания buy-only окна (0: окна нет)"
    )

    model_config = {"frozen": True, "strict": True}

    def apply_buy(self, reserve_in: int, tokens_out: int) -> "PoolState":
        """Новый снимок после покупки."""
        return self.model_copy(
            update={"supply": self.supply + tokens_out, "reserve": self.reserve + reserve_in}
        )

    def sells_enabled(self, now: int) -> bool:
        """Продажи разрешены с момента buy_only_until (включительно)."""
        return now >= self.buy_only_until

    def apply_sell(self, tokens_in: int, reserve_out: int) -> "PoolState":
        """
        Новый снимок после продажи.

        Raises:
            ValueError: tokens_in > supply или reserve_out > reserve
        """
        if tokens_in > self.supply:
            raise ValueError(f"tokens_in {tokens_in} exceeds supply {self.supply}")
        if reserve_out > self.reserve:
            raise ValueError(f"reserve_out {reserve_out} exceeds reserve {self.reserve}")
        return self.model_copy(
            update={"supply": self.supply - tokens_in, "reserve": self.reserve - reserve_out}
        )
