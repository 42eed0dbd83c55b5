from marshmallow import Schema, fields, validate

from models import InvoiceStatus, ProjectStatus


class ClientCreateSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=120))
    email = fields.Email(required=True)
    company = fields.String(required=True, validate=validate.Length(min=1, max=120))


class ClientUpdateSchema(Schema):
    name = fields.String(validate=validate.Length(min=1, max=120))
    email = fields.Email()
    company = fields.String(validate=validate.Length(min=1, max=120))


class ProjectCreateSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=1))
    client_id = fields.String(required=True, validate=validate.Length(min=1))
    status = fields.Enum(ProjectStatus, by_value=True, required=True)
    amount = fields.Float(required=True, allow_nan=False)
    deadline = fields.Date(required=True)


class ProjectUpdateSchema(Schema):
    name = fields.String(validate=validate.Length(min=1))
    client_id = fields.String(validate=validate.Length(min=1))
    status = fields.Enum(ProjectStatus, by_value=True)
    amount = fields.Float(allow_nan=False)
    deadline = fields.Date()


class InvoiceCreateSchema(Schema):
    client = fields.String(validate=validate.Length(min=1))
    client_id = fields.String(validate=validate.Length(min=1))
    amount = fields.Float(required=True, allow_nan=False, validate=validate.Range(min=0))
    status = fields.Enum(InvoiceStatus, by_value=True, load_default=InvoiceStatus.PENDING)


class InvoiceUpdateSchema(Schema):
    client = fields.String(required=True, validate=validate.Length(min=1))
    client_id = fields.String(load_default=None, allow_none=True)
    amount = fields.Float(required=True, allow_nan=False, validate=validate.Range(min=0))
    status = fields.Enum(InvoiceStatus, by_value=True, required=True)
