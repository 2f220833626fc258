from rest_framework import serializers


class PayloadTemplatesResponseSerializer(serializers.Serializer):
    version = serializers.IntegerField()
    schema = serializers.JSONField()
    templates = serializers.JSONField()


class WeightageSummarySerializer(serializers.Serializer):
    total_weightage = serializers.IntegerField()
    remaining_weightage = serializers.IntegerField()
    is_over_limit = serializers.BooleanField()
    limit = serializers.IntegerField()
