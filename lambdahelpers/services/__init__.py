"""
Service layer: S3 bucket storage and SES/SNS notifiers.
"""
