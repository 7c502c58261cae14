"""
lambdahelpers — small helpers around AWS service clients.

Provides S3 bucket synchronization (directory upload, paginated bucket
download, single-object read/delete) and SES/SNS notifiers for
short-lived jobs such as Lambda functions.
"""

__version__ = "0.3.0"
