# apps/patients/serializers.py
from rest_framework import serializers


class ActionSerializer(serializers.Serializer):
    name = serializers.CharField()
    kind = serializers.CharField()
    icon = serializers.CharField()
    href = serializers.CharField()


class DisplayRowSerializer(serializers.Serializer):
    patientId = serializers.CharField(source="patient_id")
    name = serializers.CharField()
    hospitalNumber = serializers.CharField(source="hospital_number")
    sex = serializers.CharField()
    dateOfBirth = serializers.CharField(source="date_of_birth", allow_null=True)
    # "N years" / "N month(s)" / "Less than a month", or 0 when DOB is missing
    age = serializers.JSONField()
    actions = ActionSerializer(many=True)


class PageResultSerializer(serializers.Serializer):
    data = DisplayRowSerializer(source="rows", many=True)
    page = serializers.IntegerField()
    totalCount = serializers.IntegerField(source="total_count")


class PageQuerySerializer(serializers.Serializer):
    pageSize = serializers.IntegerField(min_value=1, max_value=100, default=10)
    pageNo = serializers.IntegerField(min_value=0, default=0)
    searchParam = serializers.CharField(required=False, allow_blank=True, default="")
    generation = serializers.IntegerField(min_value=0, required=False)
    status = serializers.ChoiceField(choices=["with", "without"], required=False, default="with")


class DeleteQuerySerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=False, max_length=500)
