"""
WebSocket Lambda handlers for connection management, messages and uploads.

Each module is deployed flat (see bundles.toml) and exposes `handler(event, context)`;
router.handler serves every route from a single function.
"""
