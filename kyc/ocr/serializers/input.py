from rest_framework import serializers

IMAGE_TYPE_CHOICES = ["base64", "url"]


class ExtractInputSerializer(serializers.Serializer):
    image = serializers.CharField(
        trim_whitespace=True,
        error_messages={"required": "Image is required", "blank": "Image is required", "null": "Image is required"},
    )
    type = serializers.ChoiceField(choices=IMAGE_TYPE_CHOICES, required=False)


class FileInputSerializer(serializers.Serializer):
    file = serializers.FileField(
        allow_empty_file=False,
        error_messages={"required": "File is required", "empty": "File is required", "invalid": "File is required"},
    )


class CropQuerySerializer(serializers.Serializer):
    # ?crop=true&cropHeight=100
    crop = serializers.BooleanField(required=False, default=False)
    cropHeight = serializers.IntegerField(required=False, min_value=1, allow_null=True, default=None)
