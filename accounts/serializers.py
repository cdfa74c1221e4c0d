from django.contrib.auth import authenticate
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .models import User, UserRole, Profile, Organizer
from .validators import (
    validate_password_strength, validate_phone, required_text, optional_text,
    optional_url, email_field
)


class ProfileSerializer(serializers.ModelSerializer):
    full_name = required_text(100, "Name is required", label='Name')
    college_name = required_text(200, "College name is required", label='College name')
    degree = required_text(100, "Degree is required", label='Degree')
    passout_year = serializers.IntegerField(
        min_value=2020,
        max_value=2040,
        error_messages={
            'min_value': "Year must be 2020 or later",
            'max_value': "Year must be 2040 or earlier",
            'invalid': "Year must be a number",
        },
    )
    heard_from = required_text(100, "This field is required")

    class Meta:
        model = Profile
        fields = ['id', 'full_name', 'college_name', 'degree', 'passout_year', 'heard_from', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def create(self, validated_data):
        user = self.context['request'].user
        if Profile.objects.filter(user=user).exists():
            raise serializers.ValidationError("Profile already exists.")
        return Profile.objects.create(user=user, **validated_data)


class OrganizerSerializer(serializers.ModelSerializer):
    organization_name = required_text(200, "Organization name is required", label='Organization name')
    contact_email = email_field()
    contact_phone = serializers.CharField(required=False, allow_blank=True)
    website = optional_url()
    description = optional_text(1000)

    class Meta:
        model = Organizer
        fields = ['id', 'organization_name', 'contact_email', 'contact_phone', 'website', 'description', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_contact_phone(self, value):
        if value:
            validate_phone(value)
        return value

    def create(self, validated_data):
        user = self.context['request'].user
        if Organizer.objects.filter(user=user).exists():
            raise serializers.ValidationError("Organizer profile already exists.")
        return Organizer.objects.create(user=user, **validated_data)


class RoleCheckSerializer(serializers.Serializer):
    authorized = serializers.BooleanField()
    redirect_to = serializers.CharField(allow_null=True)
    message = serializers.CharField(allow_null=True)


class UserRoleSerializer(serializers.ModelSerializer):
    email = serializers.CharField(source='user.email', read_only=True)

    class Meta:
        model = UserRole
        fields = ['id', 'user', 'email', 'role', 'created_at']


class UserSerializer:
    class SignupSerializer(serializers.Serializer):
        name = required_text(100, "Name is required", label='Name')
        email = email_field()
        password = serializers.CharField(write_only=True, trim_whitespace=False)
        confirm_password = serializers.CharField(
            write_only=True,
            trim_whitespace=False,
            error_messages={'blank': "Please confirm your password", 'required': "Please confirm your password"},
        )

        def validate_password(self, value):
            return validate_password_strength(value)

        def validate_email(self, value):
            if User.objects.filter(email__iexact=value).exists():
                raise serializers.ValidationError("This email is already in use.")
            return value

        def validate(self, data):
            if data['password'] != data['confirm_password']:
                raise serializers.ValidationError({"confirm_password": "Passwords do not match"})
            return data

        def create(self, validated_data):
            user = User.objects.create_user(
                email=validated_data['email'],
                full_name=validated_data['name'],
                password=validated_data['password'],
            )
            UserRole.objects.create(user=user, role=UserRole.STUDENT)
            return user

    class LoginSerializer(serializers.Serializer):
        email = serializers.EmailField()
        password = serializers.CharField(write_only=True, trim_whitespace=False)

        def validate(self, data):
            user = authenticate(request=self.context.get('request'), email=data['email'], password=data['password'])
            if not user:
                raise AuthenticationFailed("Invalid login credentials")
            tokens = user.tokens()
            has_profile = Profile.objects.filter(user=user).exists()
            return {
                'user': user,
                'access_token': tokens['access'],
                'refresh_token': tokens['refresh'],
                'redirect_to': '/home' if has_profile else '/user-info',
            }

    class LogoutSerializer(serializers.Serializer):
        refresh_token = serializers.CharField()

        def save(self, **kwargs):
            try:
                RefreshToken(self.validated_data['refresh_token']).blacklist()
            except TokenError:
                raise serializers.ValidationError({"refresh_token": "Token is invalid or expired."})

    class RetrieveSerializer(serializers.ModelSerializer):
        role = serializers.SerializerMethodField()
        has_profile = serializers.SerializerMethodField()

        class Meta:
            model = User
            fields = ['id', 'email', 'full_name', 'role', 'has_profile', 'date_joined']

        def get_role(self, obj):
            return obj.role

        def get_has_profile(self, obj):
            return Profile.objects.filter(user=obj).exists()
