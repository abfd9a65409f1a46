"""Marshmallow schemas for sales and tickets."""

from __future__ import annotations

from datetime import timezone

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, pre_load, validate, validates_schema

from lotto_hub.models.sale import DrawRef, Sale, Ticket
from lotto_hub.utils.clock import DRAW_TIME_RE

_TICKET_NUMBER = validate.Regexp(r"^\d{1,10}$", error="Ticket number must be 1 to 10 digits")


class DrawRefSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    lottery_id = fields.String(required=True, data_key="lotteryId", validate=validate.Length(min=1))
    draw_time = fields.String(
        required=True,
        data_key="drawTime",
        validate=validate.Regexp(DRAW_TIME_RE, error="Draw time must look like 02:00 PM"),
    )

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return DrawRef(**data)


def _check_unique_draws(draws: list[DrawRef] | None) -> None:
    if draws and len(draws) != len(set(draws)):
        raise ValidationError({"draws": ["Each draw may only be listed once"]})


class TicketSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.String(required=True, validate=validate.Length(min=1))
    ticket_number = fields.String(required=True, data_key="ticketNumber", validate=_TICKET_NUMBER)
    fractions = fields.Integer(required=True, validate=validate.Range(min=1))
    cost = fields.Float(required=True, validate=validate.Range(min=0), allow_nan=False)

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return Ticket(**data)


class SaleSchema(Schema):
    """Stored / serialized Sale."""

    class Meta:
        unknown = EXCLUDE

    id = fields.String(required=True, validate=validate.Length(min=1))
    draws = fields.List(fields.Nested(DrawRefSchema), required=True, validate=validate.Length(min=1))
    tickets = fields.List(fields.Nested(TicketSchema), required=True, validate=validate.Length(min=1))
    total_cost = fields.Float(required=True, data_key="totalCost", validate=validate.Range(min=0), allow_nan=False)
    sold_at = fields.AwareDateTime(required=True, data_key="soldAt", default_timezone=timezone.utc)
    customer_name = fields.String(data_key="customerName", allow_none=True, load_default=None)
    customer_phone = fields.String(data_key="customerPhone", allow_none=True, load_default=None)
    special_play_id = fields.String(data_key="specialPlayId", allow_none=True, load_default=None)

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        data["draws"] = tuple(data["draws"])
        data["tickets"] = tuple(data["tickets"])
        return Sale(**data)


class TicketLineSchema(Schema):
    """One ticket line of a new sale."""

    ticket_number = fields.String(required=True, data_key="ticketNumber", validate=_TICKET_NUMBER)
    fractions = fields.Integer(required=False, load_default=1, validate=validate.Range(min=1, max=1000))


class SaleCreateSchema(Schema):
    """Validate create Sale payload."""

    draws = fields.List(
        fields.Nested(DrawRefSchema),
        required=True,
        validate=validate.Length(min=1, error="At least one draw is required"),
    )
    tickets = fields.List(
        fields.Nested(TicketLineSchema),
        required=True,
        validate=validate.Length(min=1, max=100, error="Between 1 and 100 tickets per sale"),
    )
    customer_name = fields.String(data_key="customerName", allow_none=True, load_default=None)
    customer_phone = fields.String(
        data_key="customerPhone",
        allow_none=True,
        load_default=None,
        validate=validate.Regexp(r"^[0-9+()\- ]{0,20}$", error="Invalid phone number"),
    )
    special_play_id = fields.String(data_key="specialPlayId", allow_none=True, load_default=None)

    @validates_schema
    def _validate_draws(self, data, **kwargs):  # type: ignore[no-untyped-def]
        _check_unique_draws(data.get("draws"))


class RecordedTicketSchema(Schema):
    """Ticket line of an externally built sale; the id is optional."""

    id = fields.String(required=False, load_default=None, validate=validate.Length(min=1))
    ticket_number = fields.String(required=True, data_key="ticketNumber", validate=_TICKET_NUMBER)
    fractions = fields.Integer(required=True, validate=validate.Range(min=1))
    cost = fields.Float(required=True, validate=validate.Range(min=0), allow_nan=False)


class SaleRecordSchema(Schema):
    """Validate a complete sale payload posted for verification.

    Accepts either ``draws`` or the single-draw ``lotteryId``/``drawTime`` pair,
    and either ``soldAt`` or ``createdAt`` for the timestamp.
    """

    id = fields.String(required=True, validate=validate.Regexp(r"^[A-Za-z0-9_\-]{1,64}$", error="Invalid sale id"))
    draws = fields.List(fields.Nested(DrawRefSchema), required=True, validate=validate.Length(min=1))
    tickets = fields.List(fields.Nested(RecordedTicketSchema), required=True, validate=validate.Length(min=1))
    total_cost = fields.Float(required=True, data_key="totalCost", validate=validate.Range(min=0), allow_nan=False)
    sold_at = fields.AwareDateTime(required=True, data_key="soldAt", default_timezone=timezone.utc)
    customer_name = fields.String(data_key="customerName", allow_none=True, load_default=None)
    customer_phone = fields.String(data_key="customerPhone", allow_none=True, load_default=None)
    special_play_id = fields.String(data_key="specialPlayId", allow_none=True, load_default=None)

    @pre_load
    def _accept_legacy_shape(self, data, **kwargs):  # type: ignore[no-untyped-def]
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "draws" not in data and "lotteryId" in data:
            data["draws"] = [{"lotteryId": data.pop("lotteryId"), "drawTime": data.pop("drawTime", None)}]
        if "soldAt" not in data and "createdAt" in data:
            data["soldAt"] = data.pop("createdAt")
        return data

    @validates_schema
    def _validate_draws(self, data, **kwargs):  # type: ignore[no-untyped-def]
        _check_unique_draws(data.get("draws"))
