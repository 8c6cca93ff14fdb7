import django.db.models.deletion
import core.models.mixins
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('name', models.CharField(max_length=150)),
                ('role', models.CharField(choices=[('writer', 'Writer'), ('admin', 'Admin')], default='writer', max_length=20)),
                ('verified', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('is_staff', models.BooleanField(default=False)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'User',
                'verbose_name_plural': 'Users',
                'db_table': 'users',
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('username', models.CharField(blank=True, default='', max_length=254)),
                ('action', models.CharField(choices=[('CREATE', 'Create'), ('UPDATE', 'Update'), ('DELETE', 'Delete'), ('REVIEW', 'Review decision'), ('LOGIN', 'Login'), ('LOGOUT', 'Logout'), ('EXPORT', 'Export')], max_length=20)),
                ('resource_type', models.CharField(max_length=50)),
                ('resource_id', models.CharField(blank=True, default='', max_length=36)),
                ('description', models.TextField(blank=True, default='')),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.TextField(blank=True, default='')),
                ('extra_data', models.JSONField(blank=True, null=True)),
                ('timestamp', models.IntegerField(db_index=True, default=core.models.mixins.utc_timestamp)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['user', 'action'], name='idx_audit_user_action'),
                    models.Index(fields=['resource_type', 'resource_id'], name='idx_audit_resource'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Submission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('category', models.CharField(max_length=100)),
                ('subject', models.CharField(max_length=150)),
                ('topic', models.CharField(max_length=200)),
                ('subtopic', models.CharField(blank=True, default='', max_length=200)),
                ('images', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('pending', 'Pending review'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=20)),
                ('rejection_reason', models.TextField(blank=True, default='')),
                ('question', models.TextField()),
                ('choices', models.JSONField(default=list)),
                ('explanations', models.JSONField(default=list)),
                ('correct_choice', models.IntegerField(default=0)),
                ('reference', models.TextField(blank=True, default='')),
                ('difficulty', models.CharField(choices=[('easy', 'Easy'), ('normal', 'Normal'), ('hard', 'Hard')], default='normal', max_length=10)),
                ('writer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='submissions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'submissions',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['writer', 'status'], name='idx_submission_writer_status'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OsceStation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('category', models.CharField(max_length=100)),
                ('subject', models.CharField(max_length=150)),
                ('topic', models.CharField(max_length=200)),
                ('subtopic', models.CharField(blank=True, default='', max_length=200)),
                ('images', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('pending', 'Pending review'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=20)),
                ('rejection_reason', models.TextField(blank=True, default='')),
                ('title', models.CharField(max_length=200)),
                ('station_type', models.CharField(choices=[('history', 'History taking'), ('examination', 'Examination')], max_length=20)),
                ('case_description', models.TextField()),
                ('history_sections', models.JSONField(blank=True, null=True)),
                ('marking_scheme', models.JSONField(blank=True, default=list)),
                ('follow_ups', models.JSONField(blank=True, default=list)),
                ('total_marks', models.FloatField(default=0)),
                ('writer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='oscestations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'osce_stations',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['writer', 'status'], name='idx_station_writer_status'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Penalty',
            fields=[
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('reason', models.TextField()),
                ('penalty_type', models.CharField(choices=[('warning', 'Warning'), ('monetary', 'Monetary')], default='warning', max_length=20)),
                ('amount', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('writer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='penalties', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'penalties',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('message', models.TextField()),
                ('read', models.BooleanField(default=False)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'notifications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'read'], name='idx_notification_user_read'),
                ],
            },
        ),
    ]
