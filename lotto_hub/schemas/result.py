"""Schemas for draw results and winners."""

from __future__ import annotations

from datetime import timezone

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate, validates_schema

from lotto_hub.models.result import Winner
from lotto_hub.utils.clock import DRAW_TIME_RE

_PRIZE = validate.Regexp(r"^\d{0,10}$", error="Prize numbers must be digits")


def _prizes_field(**kwargs) -> fields.List:  # type: ignore[no-untyped-def]
    return fields.List(
        fields.String(validate=_PRIZE),
        validate=validate.Length(min=1, max=3, error="Between 1 and 3 prizes"),
        **kwargs,
    )


class PrizesSchema(Schema):
    """Validate a prize list update: 1-3 entries, at least one non-empty."""

    prizes = _prizes_field(required=True)

    @validates_schema
    def _validate_not_blank(self, data, **kwargs):  # type: ignore[no-untyped-def]
        prizes = [p.strip() for p in data.get("prizes") or []]
        if not any(prizes):
            raise ValidationError({"prizes": ["At least one prize number is required"]})


class ResultCreateSchema(PrizesSchema):
    """Validate a new result for today's draw."""

    lottery_id = fields.String(required=True, data_key="lotteryId", validate=validate.Length(min=1))
    draw_time = fields.String(
        required=True,
        data_key="drawTime",
        validate=validate.Regexp(DRAW_TIME_RE, error="Draw time must look like 02:00 PM"),
    )


class WinningResultsSchema(Schema):
    """Wraps the nested results mapping so it can be validated as a whole."""

    # date -> lotteryId -> drawTime -> prizes
    results = fields.Dict(
        keys=fields.String(validate=validate.Regexp(r"^\d{4}-\d{2}-\d{2}$")),
        values=fields.Dict(
            keys=fields.String(validate=validate.Length(min=1)),
            values=fields.Dict(
                keys=fields.String(validate=validate.Regexp(DRAW_TIME_RE)),
                values=_prizes_field(),
            ),
        ),
    )


class WinnerSchema(Schema):
    """Stored / serialized Winner."""

    class Meta:
        unknown = EXCLUDE

    id = fields.String(required=True, validate=validate.Length(min=1))
    ticket_id = fields.String(required=True, data_key="ticketId")
    sale_id = fields.String(required=True, data_key="saleId")
    lottery_id = fields.String(required=True, data_key="lotteryId")
    draw_time = fields.String(required=True, data_key="drawTime")
    draw_date = fields.String(required=True, data_key="drawDate", validate=validate.Regexp(r"^\d{4}-\d{2}-\d{2}$"))
    ticket_number = fields.String(required=True, data_key="ticketNumber")
    prize_tier = fields.Integer(required=True, data_key="prizeTier", validate=validate.Range(min=1, max=3))
    fractions = fields.Integer(load_default=1, validate=validate.Range(min=0))
    resolved_at = fields.AwareDateTime(required=True, data_key="resolvedAt", default_timezone=timezone.utc)
    paid = fields.Boolean(load_default=False)
    paid_at = fields.AwareDateTime(data_key="paidAt", allow_none=True, load_default=None, default_timezone=timezone.utc)
    special_play_id = fields.String(data_key="specialPlayId", allow_none=True, load_default=None)

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return Winner(**data)


class WinnersQuerySchema(Schema):
    date = fields.String(load_default=None, validate=validate.Regexp(r"^\d{4}-\d{2}-\d{2}$"))
    lottery_id = fields.String(data_key="lotteryId", load_default=None)
    draw_time = fields.String(data_key="drawTime", load_default=None)
    paid = fields.Boolean(load_default=None, allow_none=True)
