"""Lambda function answering tag-filtered queries with S3 Select.

This package builds the select expression, streams the matching rows out
of the CSV dataset and returns them as JSON through API Gateway.
"""

__version__ = "0.1.0"
