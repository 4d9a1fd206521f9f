from tortoise import BaseDBAsyncClient


async def upgrade(db: BaseDBAsyncClient) -> str:
    return """
        CREATE TABLE IF NOT EXISTS "blocks" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "owner_id" VARCHAR(255) NOT NULL,
    "owner_email" VARCHAR(255) NOT NULL,
    "title" VARCHAR(255) NOT NULL,
    "start_time" TIMESTAMPTZ NOT NULL,
    "end_time" TIMESTAMPTZ NOT NULL,
    "notification_sent" BOOL NOT NULL DEFAULT False,
    "notified_at" TIMESTAMPTZ,
    "notification_error" TEXT,
    "last_notification_attempt" TIMESTAMPTZ,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "updated_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS "idx_blocks_owner_i_3b0f1c" ON "blocks" ("owner_id");
CREATE INDEX IF NOT EXISTS "idx_blocks_start_t_7c52ae" ON "blocks" ("start_time");
CREATE TABLE IF NOT EXISTS "aerich" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "version" VARCHAR(255) NOT NULL,
    "app" VARCHAR(100) NOT NULL,
    "content" JSONB NOT NULL
);"""


async def downgrade(db: BaseDBAsyncClient) -> str:
    return """
        """
