import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("production", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="NotificationLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "alert_code",
                    models.CharField(
                        choices=[
                            ("deadline_overdue", "Loading date overdue"),
                            ("deadline_warning", "Loading date due soon"),
                            ("fabric_not_ordered", "Fabric not ordered"),
                            ("fabric_not_arrived", "Fabric not arrived"),
                        ],
                        max_length=25,
                        verbose_name="alert",
                    ),
                ),
                ("recipient", models.CharField(max_length=500, verbose_name="recipients")),
                ("sent_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("success", models.BooleanField(default=True)),
                ("error_message", models.TextField(blank=True)),
                (
                    "item",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="notification_logs",
                        to="production.productionitem",
                        verbose_name="production item",
                    ),
                ),
            ],
            options={
                "verbose_name": "notification log",
                "verbose_name_plural": "notification logs",
                "ordering": ["-sent_at"],
            },
        ),
    ]
