"""Voice platform webhooks"""
