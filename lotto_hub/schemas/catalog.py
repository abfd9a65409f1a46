"""Marshmallow schemas for catalog records (lotteries, special plays, customization)."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate, validates_schema

from lotto_hub.models.catalog import AppCustomization, Lottery, SpecialPlay, SpecialPlayTarget
from lotto_hub.utils.clock import DRAW_TIME_RE

_DIGITS = validate.Range(min=1, max=10)
_COST = validate.Range(min=0)


def _draw_time() -> fields.String:
    return fields.String(validate=validate.Regexp(DRAW_TIME_RE, error="Draw time must look like 02:00 PM"))


def _check_unique_draw_times(draw_times: list[str] | None, field_name: str = "drawTimes") -> None:
    if draw_times and len(draw_times) != len(set(draw_times)):
        raise ValidationError({field_name: ["Draw times must be unique"]})


class LotterySchema(Schema):
    """Stored / serialized Lottery."""

    class Meta:
        unknown = EXCLUDE

    id = fields.String(required=True, validate=validate.Length(min=1))
    name = fields.String(required=True, validate=validate.Length(min=1))
    icon = fields.String(load_default="ticket")
    number_of_digits = fields.Integer(required=True, data_key="numberOfDigits", validate=_DIGITS)
    cost = fields.Float(required=True, validate=_COST, allow_nan=False)
    draw_times = fields.List(_draw_time(), required=True, data_key="drawTimes", validate=validate.Length(min=1, max=4))

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        data["draw_times"] = tuple(data["draw_times"])
        return Lottery(**data)


class LotteryPayloadSchema(Schema):
    """Validate create/update Lottery payload."""

    name = fields.String(required=True, validate=validate.Length(min=1, error="Name is required"))
    icon = fields.String(required=False, allow_none=True, load_default=None)
    number_of_digits = fields.Integer(required=True, data_key="numberOfDigits", validate=_DIGITS)
    cost = fields.Float(required=True, validate=_COST, allow_nan=False)
    draw_times = fields.List(
        _draw_time(),
        required=True,
        data_key="drawTimes",
        validate=validate.Length(min=1, max=4, error="A lottery needs between 1 and 4 draw times"),
    )

    @validates_schema
    def _validate_draw_times(self, data, **kwargs):  # type: ignore[no-untyped-def]
        _check_unique_draw_times(data.get("draw_times"))


class SpecialPlayTargetSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    lottery_id = fields.String(required=True, data_key="lotteryId", validate=validate.Length(min=1))
    draw_times = fields.List(_draw_time(), required=True, data_key="drawTimes", validate=validate.Length(min=1))

    @validates_schema
    def _validate_draw_times(self, data, **kwargs):  # type: ignore[no-untyped-def]
        _check_unique_draw_times(data.get("draw_times"))

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return SpecialPlayTarget(lottery_id=data["lottery_id"], draw_times=tuple(data["draw_times"]))


class SpecialPlaySchema(Schema):
    """Stored / serialized SpecialPlay."""

    class Meta:
        unknown = EXCLUDE

    id = fields.String(required=True, validate=validate.Length(min=1))
    name = fields.String(required=True, validate=validate.Length(min=1))
    icon = fields.String(load_default="ticket")
    number_of_digits = fields.Integer(required=True, data_key="numberOfDigits", validate=_DIGITS)
    cost = fields.Float(required=True, validate=_COST, allow_nan=False)
    applies_to = fields.List(fields.Nested(SpecialPlayTargetSchema), data_key="appliesTo", load_default=list)

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        data["applies_to"] = tuple(data.get("applies_to") or ())
        return SpecialPlay(**data)


class SpecialPlayPayloadSchema(Schema):
    """Validate create/update SpecialPlay payload."""

    name = fields.String(required=True, validate=validate.Length(min=1, error="Name is required"))
    icon = fields.String(required=False, allow_none=True, load_default=None)
    number_of_digits = fields.Integer(required=True, data_key="numberOfDigits", validate=_DIGITS)
    cost = fields.Float(required=True, validate=_COST, allow_nan=False)
    applies_to = fields.List(
        fields.Nested(SpecialPlayTargetSchema),
        required=True,
        data_key="appliesTo",
        validate=validate.Length(min=1, error="A special play must apply to at least one lottery"),
    )

    @validates_schema
    def _validate_targets(self, data, **kwargs):  # type: ignore[no-untyped-def]
        ids = [t.lottery_id for t in data.get("applies_to") or []]
        if len(ids) != len(set(ids)):
            raise ValidationError({"appliesTo": ["Each lottery may only be listed once"]})


class AppCustomizationSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    app_name = fields.String(data_key="appName", load_default="Lotto Hub", validate=validate.Length(min=1, max=80))
    app_logo = fields.String(data_key="appLogo", allow_none=True, load_default=None)

    @post_load
    def _make(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return AppCustomization(**data)


class AppCustomizationPayloadSchema(Schema):
    """Validate a partial customization update."""

    app_name = fields.String(data_key="appName", validate=validate.Length(min=1, max=80))
    app_logo = fields.String(data_key="appLogo", allow_none=True)
