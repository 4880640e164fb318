from marshmallow import Schema, fields, validates_schema, post_load, ValidationError, EXCLUDE

from paystore.utils.validators import parse_amount, is_blank

TEXT_FIELDS = ('uid', 'account_ref', 'description')


class StkPushRequestSchema(Schema):
    """STK push initiation request (JSON body, form body or query string)"""

    class Meta:
        unknown = EXCLUDE

    phone = fields.Raw(load_default=None)
    amount = fields.Raw(load_default=None)
    uid = fields.Raw(load_default=None, allow_none=True)
    account_ref = fields.Raw(data_key='accountRef', load_default=None, allow_none=True)
    description = fields.Raw(load_default=None, allow_none=True)

    @validates_schema
    def validate_phone_and_amount(self, data, **kwargs):
        amount = parse_amount(data.get('amount'))
        if is_blank(data.get('phone')) or not amount:
            raise ValidationError('phone and amount required')
        if amount < 0:
            raise ValidationError('Amount must be a positive integer', field_name='amount')

    @post_load
    def normalise(self, data, **kwargs):
        data['phone'] = str(data['phone']).strip()
        data['amount'] = parse_amount(data['amount'])
        for name in TEXT_FIELDS:
            if data.get(name) is not None:
                data[name] = str(data[name])
        return data
