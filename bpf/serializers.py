from rest_framework import serializers

from .models import BPF_MAX_YEAR, BPF_MIN_YEAR, Bpf


class BpfSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(source='uuid', read_only=True)

    class Meta:
        model = Bpf
        fields = [
            'id', 'year', 'data', 'status', 'submitted_date', 'submitted_to',
            'submission_method', 'notes', 'export_reference', 'created_at', 'updated_at'
        ]


class BpfInputSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=BPF_MIN_YEAR, max_value=BPF_MAX_YEAR)
    data = serializers.DictField()
    notes = serializers.CharField(allow_blank=True, required=False)


class BpfDataSerializer(serializers.Serializer):
    data = serializers.DictField()
    notes = serializers.CharField(allow_blank=True, required=False)


class BpfSubmissionSerializer(serializers.Serializer):
    submitted_to = serializers.CharField(max_length=200)
    submission_method = serializers.CharField(max_length=100)
    notes = serializers.CharField(allow_blank=True, required=False)
