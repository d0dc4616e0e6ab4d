from rest_framework import serializers


class IdentityDataSerializer(serializers.Serializer):
    identity_number = serializers.CharField(allow_null=True)  # 16 chiffres ou null
    fullname = serializers.CharField(allow_null=True)


class ExtractOutputSerializer(serializers.Serializer):
    status = serializers.CharField()   # "success"
    message = serializers.CharField()  # "Data berhasil diekstraksi" | "NIK tidak ditemukan"
    data = IdentityDataSerializer()


class ErrorOutputSerializer(serializers.Serializer):
    status = serializers.CharField()   # "error"
    message = serializers.CharField()
    error = serializers.CharField(required=False)


class DebugOcrOutputSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    rawText = serializers.CharField(allow_blank=True)
    ocrResult = serializers.DictField()
    textLength = serializers.IntegerField()
    lines = serializers.ListField(child=serializers.CharField(allow_blank=True))
    extracted = serializers.DictField()
