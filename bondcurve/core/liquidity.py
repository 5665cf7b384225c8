"""
Liquidity operations for the linear curve: all of them are rejected.

Depositing or withdrawing either side would desynchronize the collateral
balance from the cumulative bonded volume it encodes, so the only way value
enters or leaves the pool is through the two trade directions.
"""

from __future__ import annotations

from enum import Enum, unique

from .curve_state import CurveState
from .errors import UnsupportedOperation
from .types import Amount


@unique
class LiquidityOperation(Enum):
    DEPOSIT_ALL_TOKEN_TYPES = "deposit_all_token_types"
    DEPOSIT_SINGLE_TOKEN_TYPE = "deposit_single_token_type"
    WITHDRAW_ALL_TOKEN_TYPES = "withdraw_all_token_types"
    WITHDRAW_SINGLE_TOKEN_TYPE = "withdraw_single_token_type"


def reject_liquidity_operation(state: CurveState, operation: LiquidityOperation) -> None:
    raise UnsupportedOperation(f"{operation.value} is not supported by the {state.curve_tag} curve")


def deposit_all_token_types(
    state: CurveState,
    pool_token_amount: Amount,
    maximum_token_a_amount: Amount,
    maximum_token_b_amount: Amount,
) -> None:
    reject_liquidity_operation(state, LiquidityOperation.DEPOSIT_ALL_TOKEN_TYPES)


def deposit_single_token_type(
    state: CurveState,
    source_token_amount: Amount,
    minimum_pool_token_amount: Amount,
) -> None:
    reject_liquidity_operation(state, LiquidityOperation.DEPOSIT_SINGLE_TOKEN_TYPE)


def withdraw_all_token_types(
    state: CurveState,
    pool_token_amount: Amount,
    minimum_token_a_amount: Amount,
    minimum_token_b_amount: Amount,
) -> None:
    reject_liquidity_operation(state, LiquidityOperation.WITHDRAW_ALL_TOKEN_TYPES)


def withdraw_single_token_type(
    state: CurveState,
    destination_token_amount: Amount,
    maximum_pool_token_amount: Amount,
) -> None:
    reject_liquidity_operation(state, LiquidityOperation.WITHDRAW_SINGLE_TOKEN_TYPE)
