from tortoise.models import Model
from tortoise import fields


class Block(Model):
    id = fields.IntField(primary_key=True)
    owner_id = fields.CharField(max_length=255, db_index=True)
    owner_email = fields.CharField(max_length=255)
    title = fields.CharField(max_length=255)
    start_time = fields.DatetimeField(db_index=True)
    end_time = fields.DatetimeField()
    notification_sent = fields.BooleanField(default=False)
    notified_at = fields.DatetimeField(null=True)
    notification_error = fields.TextField(null=True)
    last_notification_attempt = fields.DatetimeField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "blocks"

    def __str__(self):
        return f"{self.title} ({self.start_time.isoformat()} - {self.end_time.isoformat()})"
