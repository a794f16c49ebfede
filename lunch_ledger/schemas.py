"""Pydantic schemas for validating command payloads from the command parser"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lunch_ledger.domain.exceptions import InvalidCommandError
from lunch_ledger.domain.models import (
    ChooseRestaurant,
    Command,
    CommandType,
    DeclareIn,
    DeclareOut,
    Help,
    InfoType,
    Restaurant,
    Show,
    SubmitBought,
    SubmitCost,
    SubmitOrder,
    SubmitPayment,
    Unrecognized,
)


class RestaurantSchema(BaseModel):
    """Restaurant as resolved by the command parser"""

    name: str = Field(..., min_length=1)
    sales_tax_rate: Optional[Decimal] = Field(None, ge=0, description="Overrides the default sales tax rate")


class CommandPayload(BaseModel):
    """Raw command from the parser; payload fields are checked per command type in to_command()"""

    model_config = ConfigDict(populate_by_name=True)

    command_type: CommandType = Field(..., alias="command-type")
    info_type: Optional[InfoType] = Field(None, alias="info-type")
    requestor: Optional[str] = None
    ts: Optional[dt.datetime] = None
    channel_id: Optional[str] = Field(None, alias="channel-id")

    amount: Optional[Decimal] = None
    date: Optional[dt.date] = None
    to: Optional[str] = None
    food: Optional[str] = None
    restaurant: Optional[RestaurantSchema] = None
    plus_tax: bool = Field(False, alias="+tax?")

    def to_command(self) -> Command:
        """
        Build the Command variant for this payload.

        Raises:
            InvalidCommandError: a field the command type requires is missing
        """
        command_cls, required = _COMMAND_FIELDS[self.command_type]
        missing = [name for name in required if getattr(self, name) is None]
        if missing:
            raise InvalidCommandError(
                f"{self.command_type.value} command is missing: {', '.join(missing)}"
            )

        fields: Dict[str, Any] = {
            "requestor": self.requestor,
            "ts": self.ts,
            "channel_id": self.channel_id,
        }
        for name in required:
            fields[name] = getattr(self, name)
        if "restaurant" in fields:
            fields["restaurant"] = Restaurant(
                name=self.restaurant.name, sales_tax_rate=self.restaurant.sales_tax_rate
            )
        if command_cls is SubmitCost:
            fields["plus_tax"] = self.plus_tax
        if command_cls is Show:
            fields["date"] = self.date

        return command_cls(**fields)


_COMMAND_FIELDS: Dict[CommandType, tuple[Type[Command], tuple[str, ...]]] = {
    CommandType.SUBMIT_PAYMENT: (SubmitPayment, ("amount", "to", "date")),
    CommandType.SUBMIT_BOUGHT: (SubmitBought, ("amount", "date")),
    CommandType.SUBMIT_COST: (SubmitCost, ("amount", "date")),
    CommandType.DECLARE_IN: (DeclareIn, ("date",)),
    CommandType.DECLARE_OUT: (DeclareOut, ("date",)),
    CommandType.CHOOSE_RESTAURANT: (ChooseRestaurant, ("restaurant", "date")),
    CommandType.SUBMIT_ORDER: (SubmitOrder, ("food", "date")),
    CommandType.SHOW: (Show, ("info_type",)),
    CommandType.HELP: (Help, ()),
    CommandType.UNRECOGNIZED: (Unrecognized, ()),
}


def parse_command(data: Dict[str, Any]) -> Command:
    """Validate a raw payload dict and build its Command"""
    try:
        payload = CommandPayload.model_validate(data)
    except ValidationError as e:
        raise InvalidCommandError(f"Malformed command payload: {e}") from e
    return payload.to_command()
