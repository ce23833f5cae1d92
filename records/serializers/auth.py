from rest_framework import serializers


class GoogleUserDataSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True)
    name = serializers.CharField(required=False, allow_blank=True, max_length=150)


class GoogleLoginSerializer(serializers.Serializer):
    token = serializers.CharField()
    userData = GoogleUserDataSerializer(required=False, allow_null=True)

    def validate_token(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('token must not be empty')
        return v


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)
