from django import forms

SOURCE_CHOICES = [
    ("remote", "Latest hollywoodagegap.com feed"),
    ("upload", "Uploaded CSV snapshot"),
]

class AgeGapSourceForm(forms.Form):
    source = forms.ChoiceField(
        choices=SOURCE_CHOICES,
        required=True,
        initial="remote",
        label="Data source",
        help_text="Use the remote feed unless you have a local copy of movies.csv."
    )

    data_file = forms.FileField(
        required=False,
        label="Upload CSV (.csv)",
        help_text="Max 20 MB"
    )

    def clean_data_file(self):
        f = self.cleaned_data.get("data_file")
        if f and not (f.name or "").lower().endswith(".csv"):
            raise forms.ValidationError("Please upload a .csv file.")
        return f

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("source") == "upload" and not cleaned.get("data_file"):
            self.add_error("data_file", "Choose a CSV file to upload.")
        return cleaned
